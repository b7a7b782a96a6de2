"""Route modules for Capture Hub."""
