"""HTTP surface (FastAPI app, routers, error handling)."""
