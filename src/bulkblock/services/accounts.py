"""AccountService: maintains the reference account store."""

from __future__ import annotations

from collections.abc import Sequence

from bulkblock.domain.errors import StoreError
from bulkblock.domain.identifiers import canonicalize
from bulkblock.services.base import BaseService
from bulkblock.services.result import ServiceError, ServiceResult
from bulkblock.services.telemetry import traced


class AccountService(BaseService):
    """Registers accounts so they can later be validated and blocked."""

    @traced
    def register(self, names: Sequence[str]) -> ServiceResult:
        """Register each name after canonicalization.

        Names the site's rules reject are skipped and reported; the rest
        are stored. Registering an existing name is a no-op.
        """
        op = "register_accounts"
        oracle = self._site.name_oracle
        registered: list[dict[str, object]] = []
        errors: list[dict[str, object]] = []

        for index, raw in enumerate(names):
            name = canonicalize(raw.strip())
            if not oracle.is_valid(name):
                errors.append({"index": index, "name": raw, "error": f"Invalid username: {raw}"})
                continue
            try:
                account = self._site.accounts.register(name)
            except StoreError as exc:
                return ServiceResult(
                    ok=False,
                    op=op,
                    error=ServiceError(code="STORE_ERROR", message=str(exc)),
                )
            registered.append({"id": account.id, "name": account.name})

        data = {"registered": registered, "count": len(registered), "errors": errors}
        if not errors:
            return ServiceResult(ok=True, op=op, data=data)
        return ServiceResult(
            ok=False,
            op=op,
            data=data,
            error=ServiceError(
                code="INVALID_NAMES",
                message=f"{len(errors)} name(s) rejected",
                detail={"errors": errors},
            ),
        )
