"""Integration tests: hook dispatch from BulkBlockService to plugins."""

from __future__ import annotations

from typing import Any

import pytest

from bulkblock.infrastructure.site import Site
from bulkblock.plugins import PluginManager, hookimpl
from bulkblock.services.bulk_block import BulkBlockService
from tests.conftest import register_accounts


class RecordingPlugin:
    """Plugin that records all hook calls for verification."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []

    @hookimpl
    def post_block(
        self,
        target: str,
        performer: str,
        reason: str,
        duration: str,
        block_id: int | None,
    ) -> None:
        self.calls.append(
            (
                "post_block",
                {
                    "target": target,
                    "performer": performer,
                    "reason": reason,
                    "duration": duration,
                    "block_id": block_id,
                },
            )
        )

    @hookimpl
    def post_batch(
        self,
        performer: str,
        success_count: int,
        error_count: int,
        rejected: bool,
    ) -> None:
        self.calls.append(
            (
                "post_batch",
                {
                    "performer": performer,
                    "success_count": success_count,
                    "error_count": error_count,
                    "rejected": rejected,
                },
            )
        )


class FailingPlugin:
    @hookimpl
    def post_batch(
        self,
        performer: str,
        success_count: int,
        error_count: int,
        rejected: bool,
    ) -> None:
        raise RuntimeError("plugin exploded")


@pytest.fixture
def plugin_site(site: Site) -> Site:
    pm = PluginManager()
    site._plugin_manager = pm
    return site


def _pm(site: Site) -> PluginManager:
    assert site.plugin_manager is not None
    return site.plugin_manager


class TestHookDispatch:
    def test_post_block_per_success_then_post_batch(self, plugin_site: Site) -> None:
        plugin = RecordingPlugin()
        _pm(plugin_site).add(plugin)
        register_accounts(plugin_site, "Alice", "Bob")

        result = BulkBlockService(plugin_site).block(
            "Alice\nBob", reason="Spam", performer="Admin"
        )

        assert result.ok
        assert [name for name, _ in plugin.calls] == ["post_block", "post_block", "post_batch"]
        first = plugin.calls[0][1]
        assert first["target"] == "Alice"
        assert first["duration"] == "infinity"
        assert first["block_id"] is not None
        assert plugin.calls[-1][1] == {
            "performer": "Admin",
            "success_count": 2,
            "error_count": 0,
            "rejected": False,
        }

    def test_rejected_batch_only_reports_batch(self, plugin_site: Site) -> None:
        plugin = RecordingPlugin()
        _pm(plugin_site).add(plugin)

        BulkBlockService(plugin_site).block("Ghost", reason="Spam")

        assert plugin.calls == [
            (
                "post_batch",
                {
                    "performer": "Maintenance script",
                    "success_count": 0,
                    "error_count": 1,
                    "rejected": True,
                },
            )
        ]

    def test_plugin_failure_is_a_warning(self, plugin_site: Site) -> None:
        _pm(plugin_site).add(FailingPlugin())
        register_accounts(plugin_site, "Alice")

        result = BulkBlockService(plugin_site).block("Alice", reason="Spam")

        assert result.ok
        assert result.warnings == ["Plugin hook failed for post_batch"]

    def test_no_plugin_manager_is_a_noop(self, site: Site) -> None:
        register_accounts(site, "Alice")
        result = BulkBlockService(site).block("Alice", reason="Spam")
        assert result.ok
        assert result.warnings == []
