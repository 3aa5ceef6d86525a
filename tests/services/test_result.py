"""Tests for ServiceResult and ServiceError."""

import json

import pytest
from pydantic import ValidationError

from bulkblock.services.result import ServiceError, ServiceResult


class TestServiceResult:
    def test_success_construction(self) -> None:
        result = ServiceResult(ok=True, op="bulk_block", data={"success_count": 2})
        assert result.ok is True
        assert result.op == "bulk_block"
        assert result.data == {"success_count": 2}
        assert result.warnings == []
        assert result.error is None
        assert result.meta is None

    def test_failure_keeps_data(self) -> None:
        result = ServiceResult(
            ok=False,
            op="bulk_block",
            data={"errors": ["Failed to block Bob."]},
            error=ServiceError(code="BATCH_PARTIAL", message="1 of 2 blocks failed"),
        )
        assert result.data["errors"] == ["Failed to block Bob."]
        assert result.error is not None
        assert result.error.code == "BATCH_PARTIAL"

    def test_json_serialization(self) -> None:
        result = ServiceResult(ok=True, op="test", data={"key": "value"}, meta={"n": 1})
        parsed = json.loads(result.model_dump_json())
        assert parsed["ok"] is True
        assert parsed["data"]["key"] == "value"
        assert parsed["meta"]["n"] == 1

    def test_frozen(self) -> None:
        result = ServiceResult(ok=True, op="test")
        with pytest.raises(ValidationError):
            result.ok = False  # type: ignore[misc]


class TestServiceError:
    def test_default_detail(self) -> None:
        assert ServiceError(code="E001", message="bad").detail == {}
