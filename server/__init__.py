"""HTTP API over the graph builder core."""
