"""AppContext: shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. The runtime is built lazily so ``--help`` and
``--version`` never trigger plugin discovery.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from dataonq.config.logging import configure_from_settings

if TYPE_CHECKING:
    from dataonq.config.settings import DataOnQSettings
    from dataonq.runtime import Runtime


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: DataOnQSettings) -> None:
        self.settings = settings
        self._runtime: Runtime | None = None
        configure_from_settings(settings)

    @property
    def runtime(self) -> Runtime:
        """The dispatch runtime (built lazily on first access)."""
        if self._runtime is None:
            from dataonq.runtime import build_runtime

            self._runtime = build_runtime(self.settings)
        return self._runtime
