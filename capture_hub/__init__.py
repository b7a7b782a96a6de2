"""Capture Hub - webhook ingestion and query service for scraped web captures."""

__version__ = "0.1.0"
