"""HTTP API for the resolver service."""
