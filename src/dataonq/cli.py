"""Root CLI group for dataonq with global flags and command registration."""

from __future__ import annotations

import click

from dataonq import __version__
from dataonq.commands import register_commands
from dataonq.commands._context import AppContext
from dataonq.config.settings import DataOnQSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="dataonq")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging for dispatch internals.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """dataonq: inspect handler registration and dispatch configuration."""
    flags = {"json_output": json_output, "verbose": verbose, "log_json": log_json}
    settings = DataOnQSettings.load(
        config_path=config_path,
        **{name: value for name, value in flags.items() if value},
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
