"""
Package marker for the rental pricing catalog.
It groups the selection engine, the HTTP API, the dashboard, and the import job under one import path.
Most functionality lives in the subpackages; this file intentionally stays lightweight.
"""
