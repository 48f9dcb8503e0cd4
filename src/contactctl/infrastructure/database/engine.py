"""Database engine setup for SQLite with WAL mode.

The DB is stored at {data_root}/.contactctl/contactctl.db.

SQLAlchemy Core (not ORM) is used because contactctl is a short-lived
CLI process and the schema is a single key-value table.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import create_engine, event

from contactctl.infrastructure.database.schema import metadata

if TYPE_CHECKING:
    from pathlib import Path

    from sqlalchemy.engine import Engine

DATA_DIRNAME = ".contactctl"
DB_FILENAME = "contactctl.db"


def create_db_engine(db_path: Path) -> Engine:
    """Create a SQLite engine with WAL mode enabled."""
    engine = create_engine(f"sqlite:///{db_path}", echo=False)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    return engine


def init_database(data_root: Path) -> Engine:
    """Initialize the database at ``{data_root}/.contactctl/contactctl.db``.

    Creates the data directory and all tables. Idempotent.
    """
    data_dir = data_root / DATA_DIRNAME
    data_dir.mkdir(parents=True, exist_ok=True)

    engine = create_db_engine(data_dir / DB_FILENAME)
    metadata.create_all(engine)
    return engine
