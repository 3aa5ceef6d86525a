"""Tests for AccountService and QueryService."""

from __future__ import annotations

from bulkblock.infrastructure.database.engine import init_database
from bulkblock.infrastructure.site import Site
from bulkblock.services.accounts import AccountService
from bulkblock.services.query import QueryService
from tests.conftest import block_accounts, register_accounts


class TestAccountService:
    def test_register_canonicalizes(self, site: Site) -> None:
        result = AccountService(site).register(["alice", " bob "])
        assert result.ok
        assert result.op == "register_accounts"
        assert [a["name"] for a in result.data["registered"]] == ["Alice", "Bob"]
        assert site.accounts.resolve("Alice") is not None

    def test_register_is_idempotent(self, site: Site) -> None:
        first = register_accounts(site, "Alice")
        second = register_accounts(site, "Alice")
        assert first["registered"][0]["id"] == second["registered"][0]["id"]
        assert len(site.accounts.list_accounts()) == 1

    def test_invalid_names_reported(self, site: Site) -> None:
        result = AccountService(site).register(["Alice", "Bad#Name"])
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INVALID_NAMES"
        assert result.data["count"] == 1
        assert result.data["errors"] == [
            {"index": 1, "name": "Bad#Name", "error": "Invalid username: Bad#Name"}
        ]


class TestQueryService:
    def test_list_accounts_with_block_state(self, site: Site) -> None:
        register_accounts(site, "Bob", "Alice")
        block_accounts(site, "Bob")
        result = QueryService(site).list_accounts()
        assert result.ok
        assert result.data["count"] == 2
        assert [(a["name"], a["blocked"]) for a in result.data["items"]] == [
            ("Alice", False),
            ("Bob", True),
        ]

    def test_list_blocks(self, site: Site) -> None:
        register_accounts(site, "Alice")
        block_accounts(site, "Alice", reason="Vandalism")
        result = QueryService(site).list_blocks()
        assert result.ok
        item = result.data["items"][0]
        assert item["target"] == "Alice"
        assert item["reason"] == "Vandalism"
        assert item["performer"] == "Maintenance script"
        assert item["expiry"] == "infinity"

    def test_list_blocks_empty(self, site: Site) -> None:
        result = QueryService(site).list_blocks()
        assert result.ok
        assert result.data == {"count": 0, "items": []}

    def test_audit_log_newest_first(self, site: Site) -> None:
        register_accounts(site, "Alice", "Bob")
        block_accounts(site, "Alice")
        block_accounts(site, "Bob")
        result = QueryService(site).audit_log()
        assert result.ok
        assert [e["target"] for e in result.data["items"]] == ["Bob", "Alice"]
        assert result.data["items"][0]["type"] == "block"

    def test_audit_log_limit(self, site: Site) -> None:
        register_accounts(site, "Alice", "Bob")
        block_accounts(site, "Alice", "Bob")
        result = QueryService(site).audit_log(limit=1)
        assert result.data["count"] == 1

    def test_audit_log_invalid_limit(self, site: Site) -> None:
        result = QueryService(site).audit_log(limit=0)
        assert result.error is not None
        assert result.error.code == "INVALID_LIMIT"

    def test_unreadable_store_is_store_error(self, site: Site) -> None:
        register_accounts(site, "Alice")
        engine = init_database(site.settings.db_path)
        with engine.begin() as conn:
            conn.exec_driver_sql("DROP TABLE blocks")
        engine.dispose()
        query = QueryService(site)
        for result in (query.list_accounts(), query.list_blocks()):
            assert not result.ok
            assert result.error is not None
            assert result.error.code == "STORE_ERROR"
