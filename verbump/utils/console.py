"""
User-facing terminal output for verbump commands, built on Rich.

Diagnostics go through :mod:`verbump.utils.logger` instead. Color follows
Rich's own detection, so ``NO_COLOR`` and non-tty output are plain text;
call :func:`reset_console` after changing the environment.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import click
from rich.table import Table
from rich.theme import Theme
from rich.console import Console

THEME = Theme(
    {
        "success": "bold green",
        "error": "bold red",
        "warning": "bold yellow",
    }
)

#: Rich color per upgrade tier label.
UPGRADE_COLORS: Dict[str, str] = {
    "major": "red",
    "minor": "yellow",
    "patch": "green",
    "pre": "magenta",
    "prerelease": "magenta",
    "latest": "cyan",
    "downgrade": "red",
}

_console: Optional[Console] = None


def get_console() -> Console:
    """Return the shared console, creating it on first use."""
    global _console
    if _console is None:
        _console = Console(theme=THEME, highlight=False)
    return _console


def reset_console() -> None:
    global _console
    _console = None


def _say(style: str, prefix: str, message: str) -> None:
    # Messages carry package specifiers such as ``[^1.0.0]``; never parse markup.
    get_console().print(f"{prefix} {message}", style=style, markup=False)


def print_success(message: str, *, prefix: str = "[OK]") -> None:
    _say("success", prefix, message)


def print_error(message: str, *, prefix: str = "[ERROR]") -> None:
    _say("error", prefix, message)


def print_warning(message: str, *, prefix: str = "[WARNING]") -> None:
    _say("warning", prefix, message)


def print_table(
    rows: List[Dict[str, Any]],
    *,
    title: Optional[str] = None,
    column_styles: Optional[Dict[str, Dict[str, Any]]] = None,
    show_lines: bool = False,
) -> None:
    """Render *rows* as a table; columns are the first row's keys.

    ``column_styles`` maps a column name to keyword arguments for
    :meth:`rich.table.Table.add_column` (``style``, ``justify``...).
    Cell values may contain Rich markup.
    """
    if not rows:
        return

    table = Table(title=title, header_style="bold", show_lines=show_lines)
    columns = list(rows[0])
    styles = column_styles or {}
    for column in columns:
        table.add_column(column, **styles.get(column, {}))
    for row in rows:
        table.add_row(*(str(row.get(column, "")) for column in columns))

    get_console().print(table)


def confirm(message: str, *, default: bool = False) -> bool:
    """Ask a y/n question; Ctrl+C or end of input answers no.

    Example::

        >>> confirm("Apply 2 update(s) to package.json?")
        Apply 2 update(s) to package.json? [y/n] (n): y
        True
    """
    try:
        answer = click.prompt(
            message,
            type=click.Choice(["y", "n"], case_sensitive=False),
            default="y" if default else "n",
            show_choices=True,
        )
    except click.Abort:
        return False
    return answer == "y"


def colorize_upgrade_type(upgrade_type: str) -> str:
    """Wrap an upgrade label in Rich markup for its tier color."""
    color = UPGRADE_COLORS.get(upgrade_type.lower())
    return f"[{color}]{upgrade_type}[/{color}]" if color else upgrade_type
