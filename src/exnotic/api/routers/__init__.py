"""API routers for exnotic."""
