"""HTTP routers. Thin: every rule lives in the services."""
