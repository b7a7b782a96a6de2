"""
Ingestion pipeline for scraping-service webhook deliveries.

Stages, leaf first:
- domain: origin URL -> document id
- olemiss: game-card enrichment for the recognized sports site
- normalizer: raw object -> canonical item
- dedup: content-derived item identity
- cleaner: recursive cleaning and per-list delta computation
- merge: fold a cleaned capture into the stored document
- service: one delivery, one atomic batch
- feed: standalone sports calendar feed parser
"""

from capture_hub.ingestion.cleaner import CaptureCleaner
from capture_hub.ingestion.domain import extract_domain_identifier
from capture_hub.ingestion.feed import parse_sports_feed
from capture_hub.ingestion.merge import merge_document
from capture_hub.ingestion.normalizer import ItemNormalizer
from capture_hub.ingestion.service import IngestionService, parse_payload
from capture_hub.ingestion.storage import (
    DocumentStore,
    DocumentWrite,
    InMemoryDocumentStore,
    SQLDocumentStore,
)

__all__ = [
    "CaptureCleaner",
    "DocumentStore",
    "DocumentWrite",
    "InMemoryDocumentStore",
    "IngestionService",
    "ItemNormalizer",
    "SQLDocumentStore",
    "extract_domain_identifier",
    "merge_document",
    "parse_payload",
    "parse_sports_feed",
]
