"""HTTP layer: routers, request dependencies and error rendering."""
