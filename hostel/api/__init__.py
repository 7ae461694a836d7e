"""HTTP API for the occupancy and billing engine."""
