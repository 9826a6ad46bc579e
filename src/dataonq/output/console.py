"""Rich Console factory and renderers for dataonq CLI output.

Consoles render to a StringIO buffer so callers decide where text goes.
In non-TTY environments (tests, pipes) Rich disables color codes.
"""

from __future__ import annotations

from io import StringIO
from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.table import Table
from rich.theme import Theme

if TYPE_CHECKING:
    from dataonq.core.builder import HandlerRegistration

DATAONQ_THEME = Theme(
    {
        "dq.handler": "bold cyan",
        "dq.service": "green",
        "dq.key": "dim",
        "dq.warning": "bold yellow",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    return Console(
        file=StringIO(),
        theme=DATAONQ_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def describe_registration(registration: HandlerRegistration) -> dict[str, Any]:
    handler = registration.handler_type
    return {
        "handler": f"{handler.__module__}.{handler.__qualname__}",
        "services": [f"{t.__module__}.{t.__qualname__}" for t in registration.service_types],
    }


def render_handlers(
    registrations: tuple[HandlerRegistration, ...],
    *,
    plugins: tuple[str, ...] = (),
    warnings: tuple[str, ...] = (),
) -> str:
    """Render registered handlers as a table, followed by plugin warnings."""
    console = create_console()
    if not registrations:
        console.print("No handlers registered.", style="dq.key")
    else:
        table = Table(title="Registered handlers", show_lines=False)
        table.add_column("Handler", style="dq.handler")
        table.add_column("Services", style="dq.service")
        for registration in registrations:
            row = describe_registration(registration)
            table.add_row(row["handler"], "\n".join(row["services"]))
        console.print(table)
    if plugins:
        console.print(f"[dq.key]plugins:[/] {', '.join(plugins)}")
    for warning in warnings:
        console.print(f"[dq.warning]WARNING:[/] {warning}")
    return get_output(console)


def render_mapping(data: dict[str, Any], *, indent: int = 0) -> str:
    """Format nested settings as indented ``key: value`` lines."""
    lines: list[str] = []
    pad = "  " * indent
    for key, value in data.items():
        if isinstance(value, dict):
            lines.append(f"{pad}{key}:")
            lines.append(render_mapping(value, indent=indent + 1))
        else:
            lines.append(f"{pad}{key}: {value}")
    return "\n".join(lines)
