"""Plugin discovery and setup-time hook dispatch.

Discovery: entry points in the configured group (``dataonq.plugins`` by
default) via pluggy's setuptools loader, plus plugins registered directly.
"""

from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING

import pluggy

from dataonq.plugins.hookspecs import PROJECT_NAME, DataOnQHookSpec

if TYPE_CHECKING:
    from dataonq.container import ServiceContainer
    from dataonq.core.builder import ServiceBuilder

DEFAULT_ENTRYPOINT_GROUP = "dataonq.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages plugin discovery, loading, and setup hook dispatch."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(DataOnQHookSpec)
        self._loaded: bool = False

    def discover_and_load(self, group: str = DEFAULT_ENTRYPOINT_GROUP) -> list[str]:
        """Load plugins advertised under the entry point *group*.

        Returns a list of loaded plugin names.
        """
        count = self._pm.load_setuptools_entrypoints(group)
        self._normalize_plugin_instances()
        self._loaded = True
        logger.debug("Loaded %d entry-point plugins from %s", count, group)
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly (e.g. in-process plugins)."""
        resolved_name = name or plugin.__class__.__name__
        if self._pm.is_registered(plugin):
            return
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    @property
    def is_loaded(self) -> bool:
        """Whether discover_and_load() has been called."""
        return self._loaded

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    def get_plugins(self) -> list[object]:
        return list(self._pm.get_plugins())

    def list_plugin_names(self) -> list[str]:
        return [self._pm.get_name(p) or p.__class__.__name__ for p in self._pm.get_plugins()]

    def apply(self, builder: ServiceBuilder, container: ServiceContainer) -> list[str]:
        """Run the setup hooks of every plugin: services first, then handlers.

        Each plugin is called individually so that one broken plugin cannot
        prevent the others from registering. Returns warning messages.
        """
        warnings: list[str] = []
        for hook_name, kwargs in (
            ("dataonq_register_services", {"container": container}),
            ("dataonq_register_handlers", {"builder": builder}),
        ):
            for impl in getattr(self._pm.hook, hook_name).get_hookimpls():
                try:
                    impl.function(*(kwargs[arg] for arg in impl.argnames))
                except Exception:
                    logger.warning(
                        "Plugin %s failed in %s", impl.plugin_name, hook_name, exc_info=True
                    )
                    warnings.append(f"Plugin {impl.plugin_name} failed in {hook_name}")
        return warnings

    def _normalize_plugin_instances(self) -> None:
        """Replace registered plugin classes with instantiated objects.

        Entry-point loading may register a plugin class directly. Hook dispatch
        against class objects leaves ``self`` unbound and fails at runtime.
        """
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin):
                continue

            plugin_name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)

            try:
                instance = plugin()
            except Exception:
                logger.warning(
                    "Failed to instantiate entry-point plugin %s",
                    plugin_name,
                    exc_info=True,
                )
                continue

            self._pm.register(instance, name=plugin_name)
            logger.debug("Instantiated entry-point plugin: %s", plugin_name)
