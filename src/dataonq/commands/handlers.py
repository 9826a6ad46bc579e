"""Command: list handlers registered by installed plugins."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import click

from dataonq.output.console import describe_registration, render_handlers

if TYPE_CHECKING:
    from dataonq.commands._context import AppContext


@click.command()
@click.pass_obj
def handlers(app: AppContext) -> None:
    """List service handlers and the service types they claim."""
    runtime = app.runtime
    if app.settings.json_output:
        payload = {
            "handlers": [describe_registration(r) for r in runtime.registry.registrations],
            "plugins": list(runtime.plugin_names),
            "warnings": list(runtime.warnings),
        }
        click.echo(json.dumps(payload, indent=2))
        return

    click.echo(
        render_handlers(
            runtime.registry.registrations,
            plugins=runtime.plugin_names,
            warnings=runtime.warnings,
        ),
        nl=False,
    )
