"""I/O layer: streaming transport."""
