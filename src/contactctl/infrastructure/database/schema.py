"""SQLAlchemy Core table definitions for the contactctl database.

The database is a key-value blob store: one row per logical key, the
value being the full serialized collection. There is no per-contact
table; the contact store always reads and writes whole collections.
"""

from __future__ import annotations

from sqlalchemy import Column, LargeBinary, MetaData, Table, Text

metadata = MetaData()

blobs = Table(
    "blobs",
    metadata,
    Column("key", Text, primary_key=True),
    Column("value", LargeBinary, nullable=False),
    Column("updated", Text, nullable=False),
)
