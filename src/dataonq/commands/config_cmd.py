"""Command: show the resolved configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from dataonq.output.console import render_mapping

if TYPE_CHECKING:
    from dataonq.commands._context import AppContext


@click.command("config")
@click.pass_obj
def config_cmd(app: AppContext) -> None:
    """Print settings after merging flags, env vars and dataonq.toml."""
    if app.settings.json_output:
        click.echo(app.settings.model_dump_json(indent=2))
        return
    click.echo(render_mapping(app.settings.model_dump(mode="json")))
