"""
Package marker for source code under `rental_pricing.catalog`.
It holds the selection wizard, the catalog resolver, and the storage collaborators they rely on.
Most functionality lives in the sibling modules; this file intentionally stays lightweight.
"""
