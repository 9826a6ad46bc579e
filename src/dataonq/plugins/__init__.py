"""Extension layer: handler and service registration via pluggy.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints.
INVARIANT: Plugin failures are warnings, never errors.
"""

from dataonq.plugins.hookspecs import hookimpl
from dataonq.plugins.manager import PluginManager

__all__ = ["PluginManager", "hookimpl"]
