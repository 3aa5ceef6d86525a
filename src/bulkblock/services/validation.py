"""Batch validation: the all-or-nothing gate before any block is applied.

Each candidate runs through an ordered predicate chain and stops at its
first failure; the chain then continues with the next candidate. Any
failing candidate rejects the whole batch.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from bulkblock.domain.outcomes import BatchValidation, ValidationKind, ValidationOutcome

if TYPE_CHECKING:
    from collections.abc import Sequence

    from bulkblock.domain.ports import AccountLookup, BlockStore, NameOracle

log = structlog.get_logger(__name__)


class BatchValidator:
    """Runs well-formedness, existence, and not-already-blocked checks."""

    def __init__(
        self,
        name_oracle: NameOracle,
        accounts: AccountLookup,
        blocks: BlockStore,
    ) -> None:
        self._name_oracle = name_oracle
        self._accounts = accounts
        self._blocks = blocks

    def validate(self, candidates: Sequence[str], submitted: bool) -> BatchValidation:
        """Validate *candidates*.

        Diagnostics are only produced for a submitted batch; before
        submission the batch is reported valid so nothing surfaces early.
        """
        if not submitted:
            return BatchValidation()

        if not candidates:
            return BatchValidation(outcomes=(ValidationOutcome(kind=ValidationKind.EMPTY_BATCH),))

        outcomes = [
            outcome
            for outcome in (self._check(candidate) for candidate in candidates)
            if outcome is not None
        ]
        if outcomes:
            log.info("batch.invalid", candidates=len(candidates), failures=len(outcomes))
        return BatchValidation(outcomes=tuple(outcomes))

    def _check(self, identifier: str) -> ValidationOutcome | None:
        if not self._name_oracle.is_valid(identifier):
            return ValidationOutcome(kind=ValidationKind.INVALID_FORMAT, identifier=identifier)

        account = self._accounts.resolve(identifier)
        if account is None or not account.registered:
            return ValidationOutcome(kind=ValidationKind.NOT_FOUND, identifier=identifier)

        if self._blocks.find_active_block(account) is not None:
            return ValidationOutcome(kind=ValidationKind.ALREADY_BLOCKED, identifier=identifier)

        return None
