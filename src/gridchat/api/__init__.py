"""HTTP API for gridchat."""
