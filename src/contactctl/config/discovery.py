"""Locate contactctl.toml.

Lookup order: the CONTACTCTL_CONFIG env var (an explicit file, no
fallback), then a walk up from the starting directory to the filesystem
root. The directory holding the file becomes the data root.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "contactctl.toml"
CONFIG_ENV_VAR = "CONTACTCTL_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the nearest contactctl.toml at or above *start* (default: cwd)."""
    explicit = os.environ.get(CONFIG_ENV_VAR)
    if explicit:
        path = Path(explicit)
        return path if path.is_file() else None

    origin = (start or Path.cwd()).resolve()
    for directory in (origin, *origin.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
