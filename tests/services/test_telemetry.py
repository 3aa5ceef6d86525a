"""Tests for verbose tracing: phases, counters, lifecycle states."""

from __future__ import annotations

from bulkblock.infrastructure.site import Site
from bulkblock.services.bulk_block import BulkBlockService
from bulkblock.services.result import ServiceResult
from bulkblock.services.telemetry import (
    Phase,
    enable_telemetry,
    record_state,
    trace_span,
    traced,
)
from tests.conftest import register_accounts


class TestPhase:
    def test_counts_accumulate(self) -> None:
        phase = Phase("execute")
        phase.count("blocked")
        phase.count("blocked")
        phase.count("block_failed")
        assert phase.to_dict()["counts"] == {"blocked": 2, "block_failed": 1}

    def test_open_phase_has_zero_duration(self) -> None:
        assert Phase("x").to_dict() == {"name": "x", "duration_ms": 0.0}


class TestTraceSpan:
    def test_yields_none_when_disabled(self) -> None:
        with trace_span("x") as phase:
            assert phase is None

    def test_yields_none_outside_traced_call(self) -> None:
        enable_telemetry()
        with trace_span("x") as phase:
            assert phase is None

    def test_record_state_outside_trace_is_ignored(self) -> None:
        enable_telemetry()
        record_state("normalizing")


class TestTraced:
    def test_passthrough_when_disabled(self) -> None:
        @traced
        def op() -> ServiceResult:
            return ServiceResult(ok=True, op="op")

        assert op().meta is None

    def test_attaches_phase_tree(self) -> None:
        enable_telemetry()

        @traced
        def op() -> ServiceResult:
            with trace_span("inner") as phase:
                assert phase is not None
                phase.count("items", 2)
            record_state("done")
            return ServiceResult(ok=True, op="op")

        tree = op().meta["telemetry"]
        assert tree["name"].endswith("op")
        assert tree["states"] == ["done"]
        assert tree["children"][0]["name"] == "inner"
        assert tree["children"][0]["counts"] == {"items": 2}


class TestBatchTrace:
    def test_bulk_block_phases_and_states(self, site: Site) -> None:
        register_accounts(site, "Alice", "Bob")
        enable_telemetry()
        result = BulkBlockService(site).block("Alice\n\nBob\nalice", reason="Spam")
        assert result.meta is not None
        tree = result.meta["telemetry"]
        assert tree["name"] == "BulkBlockService.block"
        assert tree["states"] == ["normalizing", "validating", "executing", "reporting", "done"]
        normalize, validate, execute = tree["children"]
        assert normalize["counts"] == {"lines": 4, "candidates": 3}
        assert validate["counts"] == {"failures": 0}
        assert execute["counts"] == {"blocked": 2, "block_failed": 1}

    def test_rejected_batch_states(self, site: Site) -> None:
        enable_telemetry()
        result = BulkBlockService(site).block("Ghost", reason="Spam")
        tree = result.meta["telemetry"]
        assert tree["states"] == ["normalizing", "validating", "rejected", "done"]
        assert [c["name"] for c in tree["children"]] == ["normalize", "validate"]
        assert tree["children"][1]["counts"] == {"failures": 1}
