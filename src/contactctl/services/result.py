"""The return type of every service method.

INVARIANT: services never raise for expected outcomes (missing ids,
invalid input, failed writes); they return a :class:`ServiceResult`.
The CLI renders it, and embedding code inspects it directly.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ServiceError(BaseModel):
    """Why an operation failed: a stable ``code`` plus a human message."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one service call.

    Attributes:
        ok: False only when the operation was refused.
        op: Operation name, used to pick a renderer (``"add"``, ``"merge"`` ...).
        data: Operation payload; see :mod:`contactctl.services.contracts`.
        warnings: Things the caller should hear about even on success,
            such as a no-op on an unknown id or a write that did not stick.
        error: Set when ``ok`` is False.
        meta: Telemetry and other diagnostics, present with ``--verbose``.
    """

    model_config = ConfigDict(frozen=True)

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(cls, op: str, code: str, message: str, **detail: Any) -> ServiceResult:
        """Build an ``ok=False`` result; keyword arguments land in ``error.detail``."""
        return cls(ok=False, op=op, error=ServiceError(code=code, message=message, detail=detail))
