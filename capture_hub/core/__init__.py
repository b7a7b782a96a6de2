"""Core domain types, schemas and errors for Capture Hub."""
