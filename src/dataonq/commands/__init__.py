"""Subcommand modules for the dataonq CLI.

Provides register_commands() which uses deferred imports to keep
``dataonq --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from dataonq.commands.config_cmd import config_cmd
    from dataonq.commands.handlers import handlers

    cli.add_command(handlers)
    cli.add_command(config_cmd)
