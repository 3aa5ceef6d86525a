"""Verbose-mode tracing for service calls and batch phases.

``@traced`` opens a root :class:`Phase` for one service call and attaches
the finished tree to ``ServiceResult.meta["telemetry"]``. Inside it,
``trace_span`` opens child phases (normalize, validate, execute) that carry
item counters, and :func:`record_state` appends batch lifecycle states to
the root. Everything is a no-op unless ``-v`` enabled tracing.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, TypeVar, cast

import structlog

from bulkblock.services.result import ServiceResult

log = structlog.get_logger(__name__)

_enabled: ContextVar[bool] = ContextVar("bulkblock_trace_enabled", default=False)
_root: ContextVar[Phase | None] = ContextVar("bulkblock_trace_root", default=None)
_open: ContextVar[Phase | None] = ContextVar("bulkblock_trace_open", default=None)

_F = TypeVar("_F", bound=Callable[..., Any])


@dataclass
class Phase:
    """One timed step of a service call."""

    name: str
    counts: dict[str, int] = field(default_factory=dict)
    states: list[str] = field(default_factory=list)
    children: list[Phase] = field(default_factory=list)
    _started: float = field(default_factory=time.perf_counter, repr=False)
    elapsed_ms: float = 0.0

    def count(self, key: str, n: int = 1) -> None:
        self.counts[key] = self.counts.get(key, 0) + n

    def close(self) -> None:
        self.elapsed_ms = round((time.perf_counter() - self._started) * 1000, 2)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "duration_ms": self.elapsed_ms}
        if self.counts:
            data["counts"] = dict(self.counts)
        if self.states:
            data["states"] = list(self.states)
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data


def enable_telemetry() -> None:
    _enabled.set(True)


def disable_telemetry() -> None:
    """Turn tracing off and forget any open phases."""
    _enabled.set(False)
    _root.set(None)
    _open.set(None)


@contextmanager
def trace_span(name: str) -> Iterator[Phase | None]:
    """Open a child phase of the running trace; yields None outside one."""
    parent = _open.get() if _enabled.get() else None
    if parent is None:
        yield None
        return
    phase = Phase(name)
    parent.children.append(phase)
    token = _open.set(phase)
    try:
        yield phase
    finally:
        phase.close()
        _open.reset(token)


def record_state(state: str) -> None:
    """Append a batch lifecycle state to the running trace, if any."""
    root = _root.get()
    if root is not None:
        root.states.append(state)


def traced(func: _F) -> _F:
    """Trace a service method and attach the phase tree to its result."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        if not _enabled.get():
            return func(*args, **kwargs)

        root = Phase(func.__qualname__)
        root_token = _root.set(root)
        open_token = _open.set(root)
        try:
            result = func(*args, **kwargs)
        finally:
            root.close()
            _open.reset(open_token)
            _root.reset(root_token)
            log.debug("trace.done", name=root.name, duration_ms=root.elapsed_ms)

        if isinstance(result, ServiceResult):
            meta = {**(result.meta or {}), "telemetry": root.to_dict()}
            result = result.model_copy(update={"meta": meta})
        return result

    return cast(_F, wrapper)
