"""
Document Storage Module
=======================

Provides abstract and concrete implementations of the document store
that holds one merged capture document per (collection, origin domain).
"""

from __future__ import annotations

import asyncio
import copy
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from capture_hub.core.errors import StoreError
from capture_hub.db.repositories import DocumentRepository

logger = logging.getLogger(__name__)


@dataclass
class DocumentWrite:
    """A staged full-document write."""

    collection: str
    document_id: str
    body: dict[str, Any]


class DocumentStore(ABC):
    """
    Abstract base class for document storage.

    Implementations must apply a batch of writes atomically: either every
    write becomes visible or none does.
    """

    @abstractmethod
    async def get_document(self, collection: str, document_id: str) -> dict[str, Any] | None:
        """
        Read a document.

        Args:
            collection: Collection name
            document_id: Document id within the collection

        Returns:
            Document body, or None if it does not exist
        """
        pass

    @abstractmethod
    async def batch_write(self, writes: list[DocumentWrite]) -> None:
        """
        Commit full-document writes atomically.

        Args:
            writes: Writes to apply

        Raises:
            StoreError: If the batch could not be committed
        """
        pass


class SQLDocumentStore(DocumentStore):
    """Document store backed by the ``documents`` table."""

    def __init__(self, session_factory: Callable[[], Session] | None = None):
        """
        Initialize the store.

        Args:
            session_factory: Callable returning a new Session (defaults to
                the global session factory)
        """
        if session_factory is None:
            from capture_hub.db.engine import get_session_factory

            session_factory = get_session_factory()
        self._session_factory = session_factory

    async def get_document(self, collection: str, document_id: str) -> dict[str, Any] | None:
        return await asyncio.to_thread(self._read, collection, document_id)

    async def batch_write(self, writes: list[DocumentWrite]) -> None:
        if not writes:
            return
        await asyncio.to_thread(self._write, writes)

    def _read(self, collection: str, document_id: str) -> dict[str, Any] | None:
        session = self._session_factory()
        try:
            return DocumentRepository(session).get(collection, document_id)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to read {collection}/{document_id}: {e}") from e
        finally:
            session.close()

    def _write(self, writes: list[DocumentWrite]) -> None:
        session = self._session_factory()
        try:
            repo = DocumentRepository(session)
            for write in writes:
                repo.put(write.collection, write.document_id, write.body)
            session.commit()
        except (SQLAlchemyError, TypeError, ValueError) as e:
            session.rollback()
            logger.error(f"Batch write of {len(writes)} document(s) failed: {e}")
            raise StoreError(f"Failed to commit batch: {e}") from e
        finally:
            session.close()

        logger.debug(f"Committed {len(writes)} document write(s)")


class InMemoryDocumentStore(DocumentStore):
    """
    Dictionary-backed document store.

    Useful for replays and tests. Set ``fail_writes`` to make the next
    batch fail without applying any write.
    """

    def __init__(self, documents: dict[tuple[str, str], dict[str, Any]] | None = None):
        self.documents: dict[tuple[str, str], dict[str, Any]] = documents or {}
        self.fail_writes = False

    async def get_document(self, collection: str, document_id: str) -> dict[str, Any] | None:
        body = self.documents.get((collection, document_id))
        return copy.deepcopy(body) if body is not None else None

    async def batch_write(self, writes: list[DocumentWrite]) -> None:
        if self.fail_writes:
            raise StoreError("Simulated batch failure")
        for write in writes:
            self.documents[(write.collection, write.document_id)] = copy.deepcopy(write.body)
