"""Unified settings: CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. CLI flags passed by Click as init kwargs
  2. ``BULKBLOCK_*`` env vars
  3. ``bulkblock.toml`` discovered via walk-up
  4. Defaults baked into the section models
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from bulkblock.config.discovery import find_config
from bulkblock.config.models import BlockConfig, PluginsConfig, SiteConfig, UsernamesConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Top-level tables of a bulkblock.toml file, or nothing."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data = _read_toml(toml_path) if toml_path and toml_path.is_file() else {}

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise click.ClickException(f"Invalid TOML in {path}: {exc}") from exc


# toml_path handed from from_cli to settings_customise_sources
_tls = threading.local()


class BlockSettings(BaseSettings):
    """Settings for the bulkblock CLI and services.

    Attributes:
        site_root: Directory holding ``.bulkblock/`` (parent of
            ``bulkblock.toml``, or CWD if no config found).
        config_path: Explicit ``--config`` override, or None for discovery.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "BULKBLOCK_",
        "env_nested_delimiter": "__",
    }

    site_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    site: SiteConfig = Field(default_factory=SiteConfig)
    usernames: UsernamesConfig = Field(default_factory=UsernamesConfig)
    block: BlockConfig = Field(default_factory=BlockConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)

    @property
    def db_path(self) -> Path:
        return self.site_root / ".bulkblock" / self.site.db_filename

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        site_root: Path | None = None,
        **cli_flags: Any,
    ) -> BlockSettings:
        """Build settings for one CLI run; *cli_flags* beat env and TOML.

        An explicit *config_path* that is not a file means "no TOML". Without
        *site_root* the site lives next to the config file, else in the cwd.
        """
        if not config_path:
            toml_path = find_config(site_root)
        else:
            toml_path = Path(config_path) if Path(config_path).is_file() else None
        root = site_root or (toml_path.parent if toml_path else Path.cwd())

        _tls.toml_path = toml_path
        try:
            return cls(site_root=root, config_path=toml_path, **cli_flags)
        finally:
            _tls.toml_path = None
