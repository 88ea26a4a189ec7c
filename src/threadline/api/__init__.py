"""HTTP API for Threadline."""
