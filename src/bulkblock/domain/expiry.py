"""Block expiry parsing.

Accepted forms:
- Infinity sentinels: ``infinite``, ``indefinite``, ``infinity``, ``never``.
- Relative durations: ``1 week``, ``2 hours``, ``3 months 2 days``.
- Absolute ISO 8601 timestamps in the future: ``2030-01-01T00:00:00Z``.

Relative expiries are stored unresolved and resolved against the clock at
insert time via :meth:`Expiry.resolve`.
"""

from __future__ import annotations

import calendar
import re
from datetime import UTC, datetime, timedelta
from enum import StrEnum

from pydantic import BaseModel

from bulkblock.domain.errors import ExpiryParseError

INFINITY = "infinity"
INFINITY_SENTINELS = frozenset({"infinite", "indefinite", "infinity", "never"})

_UNIT_SECONDS: dict[str, int] = {
    "second": 1,
    "sec": 1,
    "minute": 60,
    "min": 60,
    "hour": 3600,
    "day": 86400,
    "week": 7 * 86400,
    "fortnight": 14 * 86400,
}
_UNIT_MONTHS: dict[str, int] = {"month": 1, "year": 12}

_TERM = re.compile(r"(\d+)\s*([a-z]+?)s?\b")


class ExpiryKind(StrEnum):
    """How an expiry resolves to a point in time."""

    INFINITE = "infinite"
    RELATIVE = "relative"
    ABSOLUTE = "absolute"


class Expiry(BaseModel):
    """A parsed expiry, resolved lazily against the current time."""

    model_config = {"frozen": True}

    raw: str
    kind: ExpiryKind
    seconds: int = 0
    months: int = 0
    at: datetime | None = None

    @property
    def is_infinite(self) -> bool:
        return self.kind == ExpiryKind.INFINITE

    @property
    def duration(self) -> str:
        """Representation recorded in the audit log."""
        return INFINITY if self.is_infinite else self.raw

    def resolve(self, now: datetime) -> datetime | None:
        """Return the absolute expiry time, or None for a permanent block."""
        if self.kind == ExpiryKind.INFINITE:
            return None
        if self.kind == ExpiryKind.ABSOLUTE:
            return self.at
        return add_months(now, self.months) + timedelta(seconds=self.seconds)


def add_months(moment: datetime, months: int) -> datetime:
    """Calendar-aware month addition, clamping to the last day of the month."""
    if months == 0:
        return moment
    index = moment.month - 1 + months
    year = moment.year + index // 12
    month = index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def _parse_relative(text: str) -> tuple[int, int] | None:
    """Parse ``N unit [N unit ...]`` into ``(seconds, months)``."""
    consumed = 0
    seconds = 0
    months = 0
    for match in _TERM.finditer(text):
        if text[consumed : match.start()].strip(" ,+"):
            return None
        count = int(match.group(1))
        unit = match.group(2)
        if unit in _UNIT_SECONDS:
            seconds += count * _UNIT_SECONDS[unit]
        elif unit in _UNIT_MONTHS:
            months += count * _UNIT_MONTHS[unit]
        else:
            return None
        consumed = match.end()
    if consumed == 0 or text[consumed:].strip():
        return None
    return seconds, months


def parse_expiry(text: str, *, now: datetime | None = None) -> Expiry:
    """Parse operator expiry text into an :class:`Expiry`.

    Raises:
        ExpiryParseError: Empty, unrecognized, zero-length, or past expiry.
    """
    raw = text.strip()
    lowered = raw.lower()
    if not lowered:
        raise ExpiryParseError("Expiry must not be empty")

    if lowered in INFINITY_SENTINELS:
        return Expiry(raw=raw, kind=ExpiryKind.INFINITE)

    relative = _parse_relative(lowered)
    if relative is not None:
        seconds, months = relative
        if seconds == 0 and months == 0:
            raise ExpiryParseError(f"Expiry duration must be positive: {raw!r}")
        expiry = Expiry(raw=raw, kind=ExpiryKind.RELATIVE, seconds=seconds, months=months)
        try:
            expiry.resolve(now or datetime.now(UTC))
        except (ValueError, OverflowError) as exc:
            raise ExpiryParseError(f"Expiry is too far in the future: {raw!r}") from exc
        return expiry

    try:
        at = datetime.fromisoformat(raw)
    except ValueError as exc:
        raise ExpiryParseError(f"Unrecognized expiry: {raw!r}") from exc
    if at.tzinfo is None:
        at = at.replace(tzinfo=UTC)
    if at <= (now or datetime.now(UTC)):
        raise ExpiryParseError(f"Expiry is in the past: {raw!r}")
    return Expiry(raw=raw, kind=ExpiryKind.ABSOLUTE, at=at)


class StandardExpiryParser:
    """Default expiry parser backed by :func:`parse_expiry`."""

    def parse(self, text: str) -> Expiry:
        return parse_expiry(text)
