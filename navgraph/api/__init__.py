"""HTTP API for NavGraph."""
