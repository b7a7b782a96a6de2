"""Web layer for Capture Hub."""
