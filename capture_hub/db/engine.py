"""Database connection for the capture document store.

The target database comes from ``DATABASE_URL``, which may be a full
SQLAlchemy URL or a bare SQLite file path. Without it, documents live in
``~/.capture_hub/capture_hub.db``. One engine and session factory are
shared per process and created on first use.
"""

import os
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

DEFAULT_DB_PATH = Path.home() / ".capture_hub" / "capture_hub.db"

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"
ALEMBIC_INI = Path(__file__).resolve().parents[2] / "alembic.ini"

_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None


def get_database_url() -> str:
    """Resolve the configured database URL, creating the SQLite directory if needed."""
    configured = os.environ.get("DATABASE_URL", "")
    if "://" in configured:
        return configured

    path = Path(configured) if configured else DEFAULT_DB_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{path}"


def get_engine() -> Engine:
    """Shared engine for the configured database."""
    global _engine
    if _engine is None:
        url = get_database_url()
        # Store calls run in worker threads
        connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
        _engine = create_engine(url, connect_args=connect_args)
    return _engine


def get_session_factory() -> sessionmaker[Session]:
    """Shared session factory bound to ``get_engine()``."""
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(autoflush=False, bind=get_engine())
    return _session_factory


def reset_engine() -> None:
    """Dispose of the shared engine so the next call re-reads ``DATABASE_URL``."""
    global _engine, _session_factory
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_factory = None


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Open a session that is closed on exit; callers commit their own work."""
    session = get_session_factory()()
    try:
        yield session
    finally:
        session.close()


def init_db() -> None:
    """Create the ``documents`` table if it does not exist."""
    from capture_hub.db.models import Base

    Base.metadata.create_all(bind=get_engine())


def run_migrations() -> None:
    """Upgrade the configured database to the latest alembic revision."""
    if not ALEMBIC_INI.exists():
        raise FileNotFoundError(f"Alembic config not found: {ALEMBIC_INI}")

    config = Config(str(ALEMBIC_INI))
    config.set_main_option("script_location", str(MIGRATIONS_DIR))
    config.set_main_option("sqlalchemy.url", get_database_url())
    command.upgrade(config, "head")
