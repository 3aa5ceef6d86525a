"""BaseService: foundation for bulkblock services.

Every service receives a :class:`Site` at construction time. The Site
provides the account, block, and audit stores plus the plugin manager.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from bulkblock.infrastructure.site import Site

logger = logging.getLogger(__name__)


class BaseService:
    """Base for all service-layer classes."""

    def __init__(self, site: Site) -> None:
        self._site = site

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str],
    ) -> None:
        """Call a plugin hook synchronously. No-op if plugins are not loaded.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        pm = self._site.plugin_manager
        if pm is None:
            return
        try:
            getattr(pm.hook, hook_name)(**payload)
        except Exception:
            logger.debug("Plugin hook failed for %s", hook_name, exc_info=True)
            warnings.append(f"Plugin hook failed for {hook_name}")
