"""HTTP API for newsdigest."""
