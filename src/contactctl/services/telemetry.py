"""Service call timing.

Off unless ``--verbose`` turns it on, in which case every ``@traced``
method builds a small tree of :class:`Span` objects (children opened
with :func:`trace_span`) and returns it under
``ServiceResult.meta["telemetry"]``.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Generator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

import structlog

from contactctl.services.result import ServiceResult

log = structlog.get_logger("contactctl.telemetry")

_active: ContextVar[bool] = ContextVar("contactctl_telemetry", default=False)
_open_span: ContextVar[Span | None] = ContextVar("contactctl_open_span", default=None)

_P = ParamSpec("_P")
_R = TypeVar("_R")


@dataclass
class Span:
    """A named, timed region of a service call."""

    name: str
    started: float = field(default_factory=time.perf_counter)
    finished: float | None = None
    children: list[Span] = field(default_factory=list)
    annotations: dict[str, Any] = field(default_factory=dict)

    @property
    def duration_ms(self) -> float:
        return 0.0 if self.finished is None else (self.finished - self.started) * 1000

    def end(self) -> None:
        self.finished = time.perf_counter()

    def annotate(self, key: str, value: Any) -> None:
        self.annotations[key] = value

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 2)}
        if self.annotations:
            out["annotations"] = dict(self.annotations)
        if self.children:
            out["children"] = [child.to_dict() for child in self.children]
        return out


@contextmanager
def _opened(span: Span) -> Generator[Span]:
    token = _open_span.set(span)
    try:
        yield span
    finally:
        span.end()
        _open_span.reset(token)


@contextmanager
def trace_span(name: str) -> Generator[Span | None]:
    """Time a block as a child of the enclosing ``@traced`` call.

    Yields ``None`` when telemetry is off or no traced call is open.
    """
    parent = _open_span.get() if _active.get() else None
    if parent is None:
        yield None
        return
    child = Span(name)
    parent.children.append(child)
    with _opened(child):
        yield child


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Record a root span for a service method and attach it to its result."""

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _active.get():
            return func(*args, **kwargs)

        with _opened(Span(func.__qualname__)) as span:
            result = func(*args, **kwargs)

        if not isinstance(result, ServiceResult):
            return result
        log.debug("span.complete", span=span.name, ok=result.ok, ms=round(span.duration_ms, 2))
        meta = {**(result.meta or {}), "telemetry": span.to_dict()}
        return result.model_copy(update={"meta": meta})  # type: ignore[return-value]

    return wrapper


def enable_telemetry() -> None:
    _active.set(True)


def disable_telemetry() -> None:
    _active.set(False)
