# This file marks the API package for the catalog HTTP layer.
# It exists so routers, schemas, and dependency wiring share one import namespace.
