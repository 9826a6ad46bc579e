"""Runtime bootstrap: wire container, plugins, handlers and runner from settings.

Setup is single-threaded: plugins populate the container and the builder,
then ``build()`` freezes the registry before any dispatch happens.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from dataonq.config.settings import DataOnQSettings
from dataonq.container import ServiceContainer
from dataonq.core.builder import HandlerRegistry, ServiceBuilder
from dataonq.dispatch.sequence import SequenceRunner
from dataonq.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Runtime:
    """Everything an orchestrator needs to dispatch proxies."""

    settings: DataOnQSettings
    container: ServiceContainer
    registry: HandlerRegistry
    runner: SequenceRunner
    plugin_names: tuple[str, ...] = ()
    warnings: tuple[str, ...] = field(default_factory=tuple)


def build_runtime(
    settings: DataOnQSettings | None = None,
    *,
    plugins: Iterable[object] = (),
    container: ServiceContainer | None = None,
) -> Runtime:
    """Build a ready-to-dispatch :class:`Runtime`.

    Entry-point plugins are discovered when ``plugins.enabled`` is set;
    *plugins* are registered in addition, in order.
    """
    settings = settings or DataOnQSettings.load()
    container = container or ServiceContainer()

    manager = PluginManager()
    if settings.plugins.enabled:
        manager.discover_and_load(settings.plugins.entrypoint_group)
    for plugin in plugins:
        manager.register_plugin(plugin)

    builder = ServiceBuilder(container, verify_commands=settings.dispatch.verify_commands)
    warnings = manager.apply(builder, container)
    registry = builder.build()
    logger.debug(
        "Runtime ready: %d handlers, %d services",
        len(registry),
        len(container.service_types()),
    )

    runner = SequenceRunner(
        registry,
        stop_on_failure=settings.dispatch.stop_on_failure,
        timing=settings.dispatch.timing,
    )
    return Runtime(
        settings=settings,
        container=container,
        registry=registry,
        runner=runner,
        plugin_names=tuple(manager.list_plugin_names()),
        warnings=tuple(warnings),
    )
