"""SQLite database engine and schema via SQLAlchemy Core."""

from contactctl.infrastructure.database.engine import create_db_engine, init_database
from contactctl.infrastructure.database.schema import blobs, metadata

__all__ = [
    "blobs",
    "create_db_engine",
    "init_database",
    "metadata",
]
