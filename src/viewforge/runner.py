"""
viewforge.runner - Build Orchestration
======================================

Entry point shared by the CLI and library users. A run is either:

- **one-shot**: build every view once, then return 0;
- **watch**: start the watcher and block until interrupted.

A project without a views directory is skipped with a notice and still
counts as a successful run; the views build is optional per project.
"""

from __future__ import annotations

import os
from pathlib import Path

from viewforge import console, watcher
from viewforge.layout import options
from viewforge.walker import walk


ENV_VAR = "VIEWFORGE_ENV"


def is_development() -> bool:
    """Whether ``VIEWFORGE_ENV`` selects development mode."""
    return os.environ.get(ENV_VAR, "").strip().lower() == "development"


def run(
    base: Path | str | None = None,
    *,
    watch: bool = False,
    audit: bool = True,
    development: bool | None = None,
) -> int:
    """
    Build a project's views, once or continuously.

    Parameters
    ----------
    base : Path | str | None
        Project root. Defaults to the current working directory.

    watch : bool, default=False
        Keep running and rebuild on change.

    audit : bool, default=True
        Run the accessibility audit on each written page.

    development : bool | None
        Targeted rebuilds in watch mode. Read from ``VIEWFORGE_ENV`` when
        None.

    Returns
    -------
    int
        Process exit status.

    Raises
    ------
    ConfigError
        If the project configuration cannot be loaded.
    """
    if development is None:
        development = is_development()

    base = Path(base).resolve() if base is not None else None
    layout = options(base)

    if not layout.views.is_dir():
        console.watching(
            f"Template skipping. {console.path_str(layout.views)} directory does not exist."
        )
        return 0

    if not watch:
        walk(layout.views, layout, audit=audit)
        console.success("Template finished")
        return 0

    observer, handler = watcher.watch(base, audit=audit, development=development)
    try:
        while observer.is_alive():
            observer.join(1)
    except KeyboardInterrupt:
        console.watching("Stopping file watcher...")
    finally:
        handler.cancel()
        observer.stop()
        observer.join()

    return 0
