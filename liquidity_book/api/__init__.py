"""HTTP API for the pool service."""
