"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, bulkblock.toml only contains overrides.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from bulkblock.domain.identifiers import DEFAULT_INVALID_CHARS, DEFAULT_MAX_LENGTH

DEFAULT_EXPIRY_OPTIONS = [
    "2 hours",
    "1 day",
    "3 days",
    "1 week",
    "2 weeks",
    "1 month",
    "3 months",
    "6 months",
    "1 year",
    "infinite",
]


class SiteConfig(BaseModel):
    """[site] section."""

    model_config = {"frozen": True}

    name: str = "my-wiki"
    db_filename: str = "bulkblock.db"


class UsernamesConfig(BaseModel):
    """[usernames] section."""

    model_config = {"frozen": True}

    max_length: int = DEFAULT_MAX_LENGTH
    invalid_chars: str = DEFAULT_INVALID_CHARS


class BlockConfig(BaseModel):
    """[block] section."""

    model_config = {"frozen": True}

    default_expiry: str = "infinite"
    default_performer: str = "Maintenance script"
    expiry_options: list[str] = Field(default_factory=lambda: list(DEFAULT_EXPIRY_OPTIONS))


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True
