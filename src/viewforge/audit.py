"""
viewforge.audit - Accessibility Audit
=====================================

Runs an external accessibility checker (``pa11y`` by default) against one
generated page. The checker is optional: when it is not installed the audit
is skipped with a notice and the build carries on.

The command can be changed in ``config/views.toml``:

    [audit]
    command = ["npx", "pa11y", "--standard", "WCAG2AA"]
"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from pathlib import Path

from viewforge import console


DEFAULT_COMMAND: tuple[str, ...] = ("pa11y",)


def run_audit(path: Path, command: Sequence[str] = DEFAULT_COMMAND) -> bool:
    """
    Audit a generated HTML file.

    Parameters
    ----------
    path : Path
        The distribution artifact to check.

    command : Sequence[str]
        Auditor command line; the file path is appended.

    Returns
    -------
    bool
        True if the auditor ran and reported no issues.

    Notes
    -----
    A missing executable is not an error. The auditor's own output is
    echoed so issues can be traced back to the page.
    """
    args = [*command, str(path)]

    try:
        result = subprocess.run(
            args,
            capture_output=True,
            text=True,
            check=True,
        )
    except FileNotFoundError:
        console.notify(f"Audit skipped: {command[0]} is not installed.")
        return False
    except subprocess.CalledProcessError as e:
        output = (e.stdout or "") + (e.stderr or "")
        console.error(f"Audit failed for {path}:\n{output.strip()}")
        return False

    console.success(f"Audit passed for {console.path_str(path)}")
    if result.stdout.strip():
        console.console.print(result.stdout.strip(), markup=False, highlight=False)
    return True
