"""HTTP API for buyer leads."""
