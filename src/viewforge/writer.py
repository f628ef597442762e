"""
viewforge.writer - Output Writer
================================

Writes compiled views into the distribution tree. The destination mirrors
the view's position under the views directory:

    src/views/index.twig             -> dist/index.html
    src/views/newsletter/index.twig  -> dist/newsletter/index.html
"""

from __future__ import annotations

from pathlib import Path

from viewforge import console
from viewforge.models import ProjectLayout
from viewforge.prettify import prettify


def dist_path(path: Path, layout: ProjectLayout) -> Path:
    """
    Compute the distribution path for a view.

    Parameters
    ----------
    path : Path
        View source file, inside ``layout.views``.

    layout : ProjectLayout
        Current project layout.

    Returns
    -------
    Path
        Destination with the template extension replaced by ``.html``.

    Raises
    ------
    ValueError
        If ``path`` is not inside the views directory.
    """
    relative = Path(path).relative_to(layout.views)
    if relative.suffix.lower() == layout.ext.lower():
        relative = relative.with_suffix(".html")
    return layout.dist / relative


def write(path: Path, content: str, layout: ProjectLayout) -> Path | None:
    """
    Write compiled content for a view to the distribution tree.

    Only the immediate parent of the destination is created; a destination
    whose grandparent is also missing fails and is reported.

    Parameters
    ----------
    path : Path
        View source file.

    content : str
        Compiled HTML.

    layout : ProjectLayout
        Current project layout.

    Returns
    -------
    Path | None
        The written file, or None if anything failed.
    """
    try:
        dist = dist_path(path, layout)

        if not dist.parent.exists():
            dist.parent.mkdir()

        if layout.beautify is not None:
            content = prettify(content, layout.beautify)

        dist.write_text(content, encoding="utf-8")

        console.describe(
            f"Template in {console.path_str(path)} out {console.path_str(dist)}"
        )

        return dist

    except Exception as e:
        console.error(f"Template (write): {path}: {e}")
        return None
