"""HTTP API for exnotic, built on FastAPI."""
