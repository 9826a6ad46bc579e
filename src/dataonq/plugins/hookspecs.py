"""Pluggy hook specifications for dataonq setup-time extensions.

Both hooks run once, during single-threaded setup, before any dispatch.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from dataonq.container import ServiceContainer
    from dataonq.core.builder import ServiceBuilder

PROJECT_NAME = "dataonq"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class DataOnQHookSpec:
    """Hook specifications for the dataonq plugin system."""

    @hookspec
    def dataonq_register_services(self, container: ServiceContainer) -> None:
        """Add concrete service instances or factories to *container*."""

    @hookspec
    def dataonq_register_handlers(self, builder: ServiceBuilder) -> None:
        """Register ServiceHandler classes on *builder*."""
