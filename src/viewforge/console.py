"""
viewforge.console - Terminal Notices
====================================

Every component reports through these helpers rather than printing
directly, so the wording and colours stay consistent:

    success   - a build step finished
    describe  - detail line for a single compiled file
    notify    - informational notice (not an error)
    watching  - watcher state changes and skipped runs
    error     - failures, written to stderr
"""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.markup import escape


console = Console()
err_console = Console(stderr=True)


def path_str(path: Path | str) -> str:
    """Format a path for display."""
    return f"[cyan]{escape(str(path))}[/]"


def success(message: str) -> None:
    console.print(f"[bold green]✓[/] {message}")


def describe(message: str) -> None:
    console.print(f"[green]✓[/] {message}")


def notify(message: str) -> None:
    console.print(f"[yellow]ℹ[/] {message}")


def watching(message: str) -> None:
    console.print(f"[magenta]👀[/] {message}")


def error(message: str) -> None:
    err_console.print(f"[red]Error:[/] {escape(message)}")
