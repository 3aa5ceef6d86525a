"""Pluggy hook specifications for bulkblock lifecycle events.

Hooks run synchronously after a submission finishes executing.
"""

from __future__ import annotations

import pluggy

hookspec = pluggy.HookspecMarker("bulkblock")
hookimpl = pluggy.HookimplMarker("bulkblock")


class BulkBlockHookSpec:
    """Hook specifications for the bulkblock plugin system."""

    @hookspec
    def post_block(
        self,
        target: str,
        performer: str,
        reason: str,
        duration: str,
        block_id: int | None,
    ) -> None:
        """Called once per identifier that was blocked and logged."""

    @hookspec
    def post_batch(
        self,
        performer: str,
        success_count: int,
        error_count: int,
        rejected: bool,
    ) -> None:
        """Called after every submission, including rejected ones."""
