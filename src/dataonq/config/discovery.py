"""Locate ``dataonq.toml`` for the settings loader."""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "dataonq.toml"
CONFIG_ENV_VAR = "DATAONQ_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file to load, or None.

    ``DATAONQ_CONFIG`` wins when set. If it names a missing file the result
    is None and no walk-up happens: settings fall back to env and defaults.

    Otherwise walk up from *start* (default: cwd) to the filesystem root and
    return the first ``dataonq.toml`` found.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        path = Path(env_path)
        return path if path.is_file() else None

    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
