"""Locate bulkblock.toml.

``BULKBLOCK_CONFIG`` names the file outright. Otherwise the search starts in
the given directory (or the cwd) and climbs toward the filesystem root.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "bulkblock.toml"
CONFIG_ENV_VAR = "BULKBLOCK_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file that applies to *start*, or None."""
    pinned = os.environ.get(CONFIG_ENV_VAR)
    if pinned:
        pinned_path = Path(pinned)
        return pinned_path if pinned_path.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
