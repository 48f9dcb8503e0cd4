"""Typed payload contracts for service results.

Contacts travel in result payloads in their wire form (camelCase keys,
as persisted). These models pin the surrounding shapes so renderers and
JSON consumers can rely on them.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T", bound=BaseModel)


def dump_validated(model_cls: type[T], data: dict[str, Any]) -> dict[str, Any]:
    """Validate *data* against *model_cls* and return a normalized payload dict."""
    return model_cls.model_validate(data).model_dump(mode="python")


class ContactItem(BaseModel):
    """One contact in wire form."""

    model_config = ConfigDict(extra="allow")

    id: str
    firstName: str  # noqa: N815
    lastName: str  # noqa: N815
    phone: list[str]
    email: list[str]
    createdAt: str  # noqa: N815
    updatedAt: str  # noqa: N815


class ContactListData(BaseModel):
    """Payload for ``QueryService.list_contacts`` and ``QueryService.search``."""

    model_config = ConfigDict(extra="allow")

    count: int
    items: list[ContactItem]


class DuplicateGroupData(BaseModel):
    """One duplicate group: the seed first, then the contacts that matched it."""

    index: int
    ids: list[str]
    items: list[ContactItem]
    reasons: dict[str, list[str]]


class DuplicatesData(BaseModel):
    """Payload for ``QueryService.duplicates``."""

    count: int
    groups: list[DuplicateGroupData]


class MergeData(BaseModel):
    """Payload for ``MutationService.merge``."""

    changed: bool
    id: str | None = None
    absorbed_ids: list[str] = []
    contact: ContactItem | None = None
    persisted: bool = True
