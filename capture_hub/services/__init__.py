"""Business logic services for Capture Hub."""

from capture_hub.services.document_service import DocumentService

__all__ = ["DocumentService"]
