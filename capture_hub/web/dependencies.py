"""FastAPI dependencies for database-backed services."""

from collections.abc import Generator
from typing import Annotated

from fastapi import Depends

from capture_hub.db.engine import get_session, get_session_factory
from capture_hub.ingestion.service import IngestionService
from capture_hub.ingestion.storage import SQLDocumentStore
from capture_hub.services.document_service import DocumentService


def get_document_service() -> Generator[DocumentService, None, None]:
    """Dependency yielding a DocumentService bound to a fresh session."""
    with get_session() as session:
        yield DocumentService(session)


def get_ingestion_service() -> IngestionService:
    """Dependency returning an IngestionService over the SQL document store."""
    return IngestionService(SQLDocumentStore(get_session_factory()))


# Type aliases for dependency injection
DocumentServiceDep = Annotated[DocumentService, Depends(get_document_service)]
IngestionServiceDep = Annotated[IngestionService, Depends(get_ingestion_service)]
