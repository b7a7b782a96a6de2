"""Command-line interface for Capture Hub."""
