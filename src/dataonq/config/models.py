"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, dataonq.toml only contains overrides.
"""

from __future__ import annotations

from pydantic import BaseModel


class DispatchConfig(BaseModel):
    """[dispatch] section."""

    model_config = {"frozen": True}

    stop_on_failure: bool = True
    verify_commands: bool = False
    timing: bool = False


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    entrypoint_group: str = "dataonq.plugins"
