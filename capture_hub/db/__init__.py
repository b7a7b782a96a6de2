"""Database initialization and persistence layer."""

from capture_hub.db.engine import (
    get_database_url,
    get_engine,
    get_session,
    get_session_factory,
    init_db,
    reset_engine,
    run_migrations,
)
from capture_hub.db.models import Base, DocumentDB
from capture_hub.db.repositories import DocumentRepository

__all__ = [
    # Engine
    "get_database_url",
    "get_engine",
    "get_session",
    "get_session_factory",
    "init_db",
    "reset_engine",
    "run_migrations",
    # Models
    "Base",
    "DocumentDB",
    # Repositories
    "DocumentRepository",
]
