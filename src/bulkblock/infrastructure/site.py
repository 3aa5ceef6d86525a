"""Site: the collaborator bundle injected into every service.

A Site owns the database engine and exposes the account, block, and
audit stores together with the name oracle and expiry parser configured
for this installation. Services never construct stores themselves.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from bulkblock.domain.expiry import StandardExpiryParser
from bulkblock.domain.identifiers import UsernameRules
from bulkblock.infrastructure.database.engine import init_database
from bulkblock.infrastructure.stores import (
    Clock,
    SqlAccountLookup,
    SqlAuditLog,
    SqlBlockStore,
    utc_now,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from bulkblock.config.settings import BlockSettings
    from bulkblock.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class Site:
    """Repository encapsulating the stores of one moderated site.

    Constructed once at CLI startup from :class:`BlockSettings` and stored
    on the click context. Services receive the Site via their
    :class:`~bulkblock.services.base.BaseService` constructor.
    """

    def __init__(self, settings: BlockSettings, *, clock: Clock = utc_now) -> None:
        self._settings = settings
        self._engine: Engine = init_database(settings.db_path)
        self.accounts = SqlAccountLookup(self._engine, clock=clock)
        self.blocks = SqlBlockStore(self._engine, clock=clock)
        self.audit_log = SqlAuditLog(self._engine, clock=clock)
        self.name_oracle = UsernameRules(
            max_length=settings.usernames.max_length,
            invalid_chars=settings.usernames.invalid_chars,
        )
        self.expiry_parser = StandardExpiryParser()
        self._plugin_manager: PluginManager | None = None

    @property
    def settings(self) -> BlockSettings:
        return self._settings

    @property
    def plugin_manager(self) -> PluginManager | None:
        """The plugin manager (None until :meth:`init_plugins` runs)."""
        return self._plugin_manager

    def init_plugins(self) -> None:
        """Discover entry-point plugins. No-op when plugins are disabled."""
        if not self._settings.plugins.enabled:
            return
        from bulkblock.plugins.manager import PluginManager

        pm = PluginManager()
        names = pm.load_entry_points()
        logger.debug("Loaded plugins: %s", names)
        self._plugin_manager = pm

    def close(self) -> None:
        self._engine.dispose()
