"""
viewforge.cli - Command Line Interface
======================================

This module provides the command-line interface for viewforge using Typer.

Architecture
------------
    app (main entry point)
    └── run      - Build views once, or watch and rebuild

Usage Examples
--------------
Build every view once:
    $ viewforge run

Watch with targeted rebuilds and no accessibility audit:
    $ VIEWFORGE_ENV=development viewforge run --watch --nopa11y

See Also
--------
- runner.py: Build orchestration
- watcher.py: Change routing
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich import print as rprint
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from viewforge import __version__
from viewforge.exceptions import ViewforgeError
from viewforge.runner import is_development, run as run_build


# =============================================================================
# CLI Application Setup
# =============================================================================

app = typer.Typer(
    name="viewforge",
    help="Compile template views to static HTML.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

console = Console()


def version_callback(value: bool) -> None:
    """Display version information and exit."""
    if value:
        console.print(Panel(
            f"[bold green]viewforge[/] version [cyan]{__version__}[/]\n\n"
            f"[dim]Template views to static HTML[/]",
            border_style="green",
        ))
        raise typer.Exit()


# =============================================================================
# Main Application Callback
# =============================================================================

@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """
    [bold]viewforge[/] - Compile template views to static HTML.

    [bold]Quick Start:[/]

        viewforge run
    """


# =============================================================================
# Run Command
# =============================================================================

@app.command()
def run(
    path: Annotated[
        Path,
        typer.Argument(
            help="Project root containing config/ and the source directory",
            file_okay=False,
            dir_okay=True,
        ),
    ] = Path("."),
    watch: Annotated[
        bool,
        typer.Option(
            "--watch",
            "-w",
            help="Watch the sources and rebuild on change.",
        ),
    ] = False,
    nopa11y: Annotated[
        bool,
        typer.Option(
            "--nopa11y",
            help="Skip the accessibility audit of generated pages.",
        ),
    ] = False,
    dev: Annotated[
        bool,
        typer.Option(
            "--dev",
            help="Targeted rebuilds while watching (same as VIEWFORGE_ENV=development).",
        ),
    ] = False,
) -> None:
    """
    Compile every view to the distribution directory.

    Views are the templates directly inside the views directory
    (default [cyan]src/views[/]); sub-directories keep their nesting in
    the output.

    [bold]Example:[/]

        viewforge run ./site --watch
    """
    try:
        code = run_build(
            path,
            watch=watch,
            audit=not nopa11y,
            development=dev or is_development(),
        )
    except ViewforgeError as e:
        rprint(f"[red]Error:[/] {escape(e.message)}")
        raise typer.Exit(e.exit_code)
    except Exception as e:
        rprint(f"[red]Error:[/] Template failed (run): {escape(str(e))}")
        raise typer.Exit(1)

    raise typer.Exit(code)
