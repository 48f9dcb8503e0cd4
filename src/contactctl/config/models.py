"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, contactctl.toml only contains
overrides. A fresh address book needs no config file at all.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

StorageBackend = Literal["sqlite", "file", "memory"]


class StorageConfig(BaseModel):
    """[storage] section."""

    model_config = {"frozen": True}

    backend: StorageBackend = "sqlite"
    key: str = "contacts"


class ContactsConfig(BaseModel):
    """[contacts] section."""

    model_config = {"frozen": True}

    # Report NOT_FOUND / MERGE_TOO_FEW instead of silently doing nothing.
    strict_missing: bool = False


class OutputConfig(BaseModel):
    """[output] section."""

    model_config = {"frozen": True}

    table_width: int = 120

