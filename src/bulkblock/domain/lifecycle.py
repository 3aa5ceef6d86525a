"""Batch submission lifecycle.

A submission moves through a fixed sequence of states. Validation is an
all-or-nothing gate (``validating -> rejected``); execution is per-item
best effort and always reaches ``reporting``.
"""

from __future__ import annotations

from enum import StrEnum


class BatchState(StrEnum):
    IDLE = "idle"
    NORMALIZING = "normalizing"
    VALIDATING = "validating"
    REJECTED = "rejected"
    EXECUTING = "executing"
    REPORTING = "reporting"
    DONE = "done"


BATCH_TRANSITIONS: dict[str, list[str]] = {
    "idle": ["normalizing"],
    "normalizing": ["validating"],
    "validating": ["rejected", "executing"],
    "rejected": ["done"],
    "executing": ["reporting"],
    "reporting": ["done"],
    "done": [],
}


def is_valid_transition(
    current: str,
    target: str,
    transitions: dict[str, list[str]] = BATCH_TRANSITIONS,
) -> bool:
    """Check if transitioning from *current* to *target* is allowed."""
    allowed = transitions.get(current, [])
    return target in allowed
