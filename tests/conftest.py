"""Shared pytest fixtures and test helpers for bulkblock tests."""

from __future__ import annotations

from collections.abc import Generator
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from bulkblock.config.settings import BlockSettings
from bulkblock.infrastructure.database.engine import init_database
from bulkblock.infrastructure.site import Site
from bulkblock.services.telemetry import disable_telemetry

FIXED_NOW = datetime(2026, 1, 15, 12, 0, tzinfo=UTC)


@pytest.fixture(autouse=True)
def _reset_telemetry() -> Generator[None]:
    """``-v`` CLI runs enable telemetry; keep it from leaking between tests."""
    yield
    disable_telemetry()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_engine(tmp_path: Path) -> Generator[Engine]:
    """Initialized SQLite engine with all tables created."""
    engine = init_database(tmp_path / ".bulkblock" / "bulkblock.db")
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def site_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Temporary site directory, isolated from any BULKBLOCK_* environment."""
    monkeypatch.delenv("BULKBLOCK_CONFIG", raising=False)
    return tmp_path


@pytest.fixture
def site(site_root: Path) -> Generator[Site]:
    """Site backed by a fresh SQLite store in a temp directory.

    Plugins are not loaded; tests that need hooks register a plugin
    manager explicitly.
    """
    settings = BlockSettings.from_cli(site_root=site_root)
    s = Site(settings)
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def _isolated_site(site_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp site root so the CLI opens an isolated store.

    Use via ``@pytest.mark.usefixtures("_isolated_site")`` on command test
    classes.
    """
    monkeypatch.chdir(site_root)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def register_accounts(site: Site, *names: str) -> dict[str, Any]:
    """Register accounts via AccountService, asserting success."""
    from bulkblock.services.accounts import AccountService

    result = AccountService(site).register(names)
    assert result.ok, result.error
    return result.data


def block_accounts(site: Site, *names: str, reason: str = "Spam") -> dict[str, Any]:
    """Block accounts via BulkBlockService, asserting success."""
    from bulkblock.services.bulk_block import BulkBlockService

    result = BulkBlockService(site).block("\n".join(names), reason=reason)
    assert result.ok, result.error
    return result.data
