"""SQLAlchemy ORM models for the capture document store."""

from datetime import UTC, datetime

from sqlalchemy import DateTime, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utc_now() -> datetime:
    """Return current UTC datetime (timezone-aware)."""
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class DocumentDB(Base):
    """
    Database model for capture documents.

    One row per (collection, document id). The document id is the domain
    identifier of the capture's origin, e.g. ``olemisssports.com``; the
    whole merged document is stored as JSON.
    """

    __tablename__ = "documents"
    __table_args__ = (UniqueConstraint("collection", "document_id", name="uq_documents_collection_document"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    collection: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    document_id: Mapped[str] = mapped_column(String(255), nullable=False)
    body_json: Mapped[str] = mapped_column(Text, nullable=False, default="{}")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now, onupdate=_utc_now)

    def __repr__(self) -> str:
        return f"<DocumentDB(collection={self.collection}, document_id={self.document_id})>"
