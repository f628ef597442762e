"""
viewforge.walker - Tree Walker
==============================

Discovers views under a directory and runs each one through the
compile-and-write pipeline:

    compile_file -> write -> run_audit (optional)

The walk is depth-first. Entries of a directory are sorted by name and then
visited last-first, so ``a.twig, b.twig, c.twig`` build in the order
``c, b, a``. Each step finishes before the next one starts.
"""

from __future__ import annotations

import os
from pathlib import Path

from viewforge import console
from viewforge.audit import run_audit
from viewforge.compiler import compile_file
from viewforge.models import ProjectLayout, SourceFile
from viewforge.writer import write


def is_view_file(path: Path, layout: ProjectLayout) -> bool:
    """Whether ``path`` carries the template extension."""
    return path.suffix.lower() == layout.ext.lower()


def main(path: Path, layout: ProjectLayout, *, audit: bool = True) -> Path | None:
    """
    Compile one view and write it to the distribution tree.

    Parameters
    ----------
    path : Path
        View source file. Paths without the template extension are ignored.

    layout : ProjectLayout
        Current project layout.

    audit : bool, default=True
        Run the accessibility audit on the written file.

    Returns
    -------
    Path | None
        The written artifact, or None when nothing was written.
    """
    path = Path(path)
    if not is_view_file(path, layout):
        return None

    compiled = compile_file(SourceFile.from_path(path), layout)
    if compiled is None:
        return None

    dist = write(path, compiled, layout)

    if dist is not None and audit:
        run_audit(dist, layout.audit_command)

    return dist


def walk(
    target: Path | str,
    layout: ProjectLayout,
    directory: Path | None = None,
    *,
    audit: bool = True,
) -> list[Path]:
    """
    Build a single view or every view below a directory.

    Parameters
    ----------
    target : Path | str
        A view file or directory, either inside ``directory`` already or a
        name relative to it.

    layout : ProjectLayout
        Current project layout.

    directory : Path | None
        Directory ``target`` is relative to. Defaults to ``layout.views``.

    audit : bool, default=True
        Run the accessibility audit on each written file.

    Returns
    -------
    list[Path]
        Written artifacts, in the order they were built.

    Notes
    -----
    A directory that cannot be read is reported and skipped; its siblings
    are still walked.
    """
    directory = Path(directory) if directory is not None else layout.views
    target = Path(target)
    if not target.is_relative_to(directory):
        target = directory / target

    if is_view_file(target, layout):
        dist = main(target, layout, audit=audit)
        return [dist] if dist is not None else []

    # Data files and assets living beside views
    if target.is_file():
        return []

    written: list[Path] = []
    try:
        entries = sorted(os.listdir(target))
    except OSError as e:
        console.error(f"Template failed (walk): {target}: {e}")
        return written

    for entry in reversed(entries):
        written.extend(walk(entry, layout, target, audit=audit))

    return written
