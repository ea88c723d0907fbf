"""Library database session management."""

from __future__ import annotations

import logging
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

from sqlalchemy import create_engine, text
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import Session, sessionmaker

from pixstash.exceptions import LibraryNotFoundError
from pixstash.library.models import ImageTag, LibraryBase, SavedImage

LIBRARY_DB_NAME = "library.db"

log = logging.getLogger(__name__)

# All ORM models for schema evolution
_ALL_MODELS = [
    SavedImage,
    ImageTag,
]


def get_library_engine(db_path: Path):
    """Create SQLAlchemy engine for the library database.

    Args:
        db_path: Path to the SQLite library file.

    Returns:
        SQLAlchemy engine for the library database.
    """
    engine = create_engine(
        f"sqlite:///{db_path}",
        connect_args={
            "timeout": 30,
            "check_same_thread": False,
        },
    )
    return engine


def delete_library(db_path: Path) -> bool:
    """Delete the library database file if it exists.

    Returns True if a file was deleted, False otherwise.
    """
    if db_path.exists():
        db_path.unlink()
        log.info("Deleted corrupt library database: %s", db_path)
        return True
    return False


def require_library(db_path: Path) -> Path:
    """Return *db_path* if it exists.

    Raises:
        LibraryNotFoundError: If there is no library file yet.
    """
    if not db_path.exists():
        raise LibraryNotFoundError(db_path)
    return db_path


@contextmanager
def get_library_session(db_path: Path) -> Generator[Session, None, None]:
    """Create a session for the library database.

    Auto-creates the file and tables on first use. If the database file is
    corrupt (e.g. truncated write), it is deleted and recreated.

    New columns and indexes are auto-added to existing tables via
    schema evolution (no migrations needed).

    Args:
        db_path: Path to the SQLite library file.

    Yields:
        SQLAlchemy Session for the library database.
    """
    try:
        yield from _open_library_session(db_path)
    except Exception as exc:
        # Detect SQLite corruption errors and retry once after deleting
        msg = str(exc).lower()
        if "malformed" in msg or "not a database" in msg:
            log.warning("Library database appears corrupt, recreating: %s", exc)
            delete_library(db_path)
            yield from _open_library_session(db_path)
        else:
            raise


def _open_library_session(db_path: Path) -> Generator[Session, None, None]:
    """Internal helper that opens the library session."""
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = get_library_engine(db_path)

    LibraryBase.metadata.create_all(engine)
    _ensure_schema(engine)

    with engine.connect() as conn:
        conn.execute(text("PRAGMA journal_mode=WAL"))
        conn.commit()

    session_factory = sessionmaker(bind=engine)
    session = session_factory()

    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
        engine.dispose()


def _ensure_schema(engine) -> None:
    """Auto-add missing columns and indexes to existing tables.

    Only additive changes (new columns, new indexes) are handled. Column
    type changes and removals need the database to be recreated.
    """
    inspector = sa_inspect(engine)
    existing_tables = set(inspector.get_table_names())

    for model in _ALL_MODELS:
        table_name = model.__tablename__
        if table_name not in existing_tables:
            continue

        existing_cols = {col["name"] for col in inspector.get_columns(table_name)}
        for column in model.__table__.columns:
            if column.name in existing_cols:
                continue
            col_type = column.type.compile(engine.dialect)
            nullable = "" if column.nullable else " NOT NULL"
            default = ""
            if column.server_default is not None:
                default = f" DEFAULT '{column.server_default.arg}'"
            ddl = f"ALTER TABLE {table_name} ADD COLUMN {column.name} {col_type}{nullable}{default}"
            with engine.begin() as conn:
                conn.execute(text(ddl))
            log.info("Schema evolution: added column %s.%s", table_name, column.name)

        existing_indexes = {idx["name"] for idx in inspector.get_indexes(table_name)}
        for index in model.__table__.indexes:
            if index.name not in existing_indexes:
                index.create(engine)
                log.info("Schema evolution: created index %s on %s", index.name, table_name)
