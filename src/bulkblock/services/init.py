"""InitService: create a new moderated site on disk.

Writes a sparse ``bulkblock.toml`` and creates the SQLite store under
``.bulkblock/``. Runs before any Site exists, so it does not extend
BaseService.
"""

from __future__ import annotations

import json
from pathlib import Path

from bulkblock.config.discovery import CONFIG_FILENAME
from bulkblock.config.models import SiteConfig
from bulkblock.infrastructure.database.engine import init_database
from bulkblock.services.result import ServiceError, ServiceResult
from bulkblock.services.telemetry import traced


def _render_config(name: str) -> str:
    # json.dumps yields a valid TOML basic string for plain names.
    return f"[site]\nname = {json.dumps(name)}\n"


class InitService:
    """Site initialization."""

    @staticmethod
    @traced
    def init_site(path: Path, *, name: str | None = None) -> ServiceResult:
        op = "init_site"
        site_root = path.resolve()
        config_path = site_root / CONFIG_FILENAME
        if config_path.exists():
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code="SITE_EXISTS",
                    message=f"A site is already initialized at {site_root}",
                    detail={"path": str(config_path)},
                ),
            )

        site_name = name or site_root.name or SiteConfig().name
        site_root.mkdir(parents=True, exist_ok=True)
        config_path.write_text(_render_config(site_name), encoding="utf-8")

        db_path = site_root / ".bulkblock" / SiteConfig().db_filename
        engine = init_database(db_path)
        engine.dispose()

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "site_path": str(site_root),
                "name": site_name,
                "config_path": str(config_path),
                "db_path": str(db_path),
            },
        )
