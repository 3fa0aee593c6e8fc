"""
Package marker for source code under `rental_pricing.dashboard`.
It groups the API client, the wizard controller, and the Streamlit entrypoint.
Most functionality lives in the sibling modules; this file intentionally stays lightweight.
"""
