"""HTTP API layer: routers, dependencies and error mapping."""
