"""Configuration: TOML discovery, pydantic-settings models, logging setup."""

from dataonq.config.models import DispatchConfig, PluginsConfig
from dataonq.config.settings import DataOnQSettings

__all__ = ["DataOnQSettings", "DispatchConfig", "PluginsConfig"]
