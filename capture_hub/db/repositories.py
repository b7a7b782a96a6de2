"""Repository classes for database operations."""

import json
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from capture_hub.db.models import DocumentDB


class DocumentRepository:
    """Repository for capture document CRUD operations."""

    def __init__(self, session: Session):
        self.session = session

    def _get_row(self, collection: str, document_id: str) -> DocumentDB | None:
        stmt = select(DocumentDB).where(
            DocumentDB.collection == collection,
            DocumentDB.document_id == document_id,
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def get(self, collection: str, document_id: str) -> dict[str, Any] | None:
        """
        Get a document body.

        Args:
            collection: Collection name.
            document_id: Document id within the collection.

        Returns:
            The decoded document, or None if it does not exist.
        """
        row = self._get_row(collection, document_id)
        return json.loads(row.body_json) if row else None

    def list_ids(self, collection: str) -> list[str]:
        """List document ids in a collection, sorted."""
        stmt = (
            select(DocumentDB.document_id)
            .where(DocumentDB.collection == collection)
            .order_by(DocumentDB.document_id)
        )
        return list(self.session.execute(stmt).scalars().all())

    def list_all(self, collection: str) -> list[tuple[str, dict[str, Any]]]:
        """List (document id, body) pairs in a collection."""
        stmt = select(DocumentDB).where(DocumentDB.collection == collection).order_by(DocumentDB.document_id)
        rows = self.session.execute(stmt).scalars().all()
        return [(row.document_id, json.loads(row.body_json)) for row in rows]

    def put(self, collection: str, document_id: str, body: dict[str, Any]) -> None:
        """
        Create or fully replace a document.

        Args:
            collection: Collection name.
            document_id: Document id within the collection.
            body: Full document body.
        """
        payload = json.dumps(body, ensure_ascii=False)
        row = self._get_row(collection, document_id)
        if row is None:
            self.session.add(DocumentDB(collection=collection, document_id=document_id, body_json=payload))
        else:
            row.body_json = payload
        self.session.flush()

    def delete(self, collection: str, document_id: str) -> bool:
        """
        Delete a document.

        Returns:
            True if deleted, False if not found.
        """
        row = self._get_row(collection, document_id)
        if row is None:
            return False
        self.session.delete(row)
        self.session.flush()
        return True

    def count(self, collection: str | None = None) -> int:
        """Count documents, optionally within one collection."""
        stmt = select(func.count()).select_from(DocumentDB)
        if collection is not None:
            stmt = stmt.where(DocumentDB.collection == collection)
        return self.session.execute(stmt).scalar_one()
