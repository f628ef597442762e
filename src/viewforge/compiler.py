"""
viewforge.compiler - Compiler Dispatch and Fragment Includer
============================================================

This module turns one source file into a string of HTML. It holds a small
registry mapping each :class:`~viewforge.models.FileKind` to a compile
strategy:

    TEMPLATE  -> compile_template   (Jinja2)
    MARKDOWN  -> compile_markdown   (Python-Markdown + post-processing)
    RAW       -> compile_raw        (file contents as is)

Extensions outside the registry are classified ``UNKNOWN`` and compiled as
raw with an informational notice.

Strategy Contract
-----------------
Every strategy takes ``(path, layout, context)`` and returns:

- ``""`` when the file does not exist, so one broken reference never
  stops the rest of the build;
- ``None`` when compiling raised. The error is reported here, at the
  strategy boundary, and the caller treats the file as producing nothing.

Includes
--------
:func:`include` is the cross-reference capability. Templates call it as a
global function (``{{ include('twig/partials/card', {'title': 'Hi'}) }}``)
and the markdown post-processor calls it for ``include{{ path }}`` markers.
References are always resolved against the source root, never against the
including file's directory, so the same reference works at any depth.

Templates can also extend or include through the ``@src/`` (or ``src::``)
namespace, which maps to the source root:

    {% extends '@src/twig/layouts/default.twig' %}

Nothing is cached. Each compile builds a new Jinja2 environment with
``cache_size=0`` so that layouts and partials edited during a watch session
are read again on the next compile.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import markdown
from jinja2 import (
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    PrefixLoader,
    select_autoescape,
)

from viewforge import console
from viewforge.models import FileKind, ProjectLayout, SourceFile
from viewforge.postprocess import render_markdown_markers
from viewforge.prettify import prettify


# =============================================================================
# Module-Level Configuration
# =============================================================================

# Namespace aliases bound to the source root: (prefix, delimiter)
NAMESPACES: tuple[tuple[str, str], ...] = (
    ("@src", "/"),
    ("src", "::"),
)

MARKDOWN_EXTENSIONS = frozenset({".md", ".markdown"})
RAW_EXTENSIONS = frozenset({".html", ".htm", ".svg", ".txt"})

Strategy = Callable[[Path, ProjectLayout, dict[str, Any]], str | None]


# =============================================================================
# Classification
# =============================================================================


def classify(extension: str, layout: ProjectLayout) -> FileKind:
    """
    Map a file extension to its compile strategy.

    Parameters
    ----------
    extension : str
        Suffix including the dot, e.g. ``.twig``.

    layout : ProjectLayout
        Supplies the template extension.

    Returns
    -------
    FileKind
        ``UNKNOWN`` for anything unregistered.

    Examples
    --------
    >>> classify(".md", layout)
    <FileKind.MARKDOWN: 'markdown'>
    """
    extension = extension.lower()
    if extension == layout.ext.lower():
        return FileKind.TEMPLATE
    if extension in MARKDOWN_EXTENSIONS:
        return FileKind.MARKDOWN
    if extension in RAW_EXTENSIONS:
        return FileKind.RAW
    return FileKind.UNKNOWN


# =============================================================================
# Template Engine Setup
# =============================================================================


def create_jinja_env(layout: ProjectLayout) -> Environment:
    """
    Create the Jinja2 environment for one compile.

    The environment is configured with:
    - A loader resolving bare names and the ``@src`` / ``src::``
      namespaces against the source root
    - No template cache (``cache_size=0``), so files are re-read
    - Autoescaping disabled, including for views rendered from strings
    - ``include()`` registered as a global function

    Parameters
    ----------
    layout : ProjectLayout
        Current project layout.

    Returns
    -------
    Environment
        Configured Jinja2 environment.
    """
    source_loader = FileSystemLoader(str(layout.base))
    namespace_loaders = [
        PrefixLoader({prefix: source_loader}, delimiter=delimiter)
        for prefix, delimiter in NAMESPACES
    ]

    env = Environment(
        loader=ChoiceLoader([*namespace_loaders, source_loader]),
        autoescape=select_autoescape([], default_for_string=False),
        cache_size=0,
        auto_reload=True,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )

    def include_fragment(ref: str, context: dict[str, Any] | None = None) -> str:
        return include(ref, layout, context)

    env.globals["include"] = include_fragment

    return env


# =============================================================================
# Compile Strategies
# =============================================================================


def compile_template(
    path: Path,
    layout: ProjectLayout,
    context: dict[str, Any],
) -> str | None:
    """
    Render a template file to HTML.

    The render data is the user configuration overlaid with ``context``;
    on a key collision the caller's value wins.
    """
    try:
        if not path.is_file():
            return ""

        source = path.read_text(encoding="utf-8")
        env = create_jinja_env(layout)

        data = {**layout.config, **context}
        rendered = env.from_string(source).render(data)

        if layout.beautify is not None:
            rendered = prettify(rendered, layout.beautify)

        return rendered

    except Exception as e:
        console.error(f"Template failed (compile.template): {path}: {e}")
        return None


def compile_markdown(
    path: Path,
    layout: ProjectLayout,
    context: dict[str, Any],
) -> str | None:
    """Convert a markdown file to HTML, then resolve its markers."""
    try:
        if not path.is_file():
            return ""

        text = path.read_text(encoding="utf-8")
        converted = markdown.markdown(text, **layout.markdown)

        return render_markdown_markers(
            converted,
            resolve=lambda ref: include(ref, layout),
            data=layout.config,
        )

    except Exception as e:
        console.error(f"Template failed (compile.markdown): {path}: {e}")
        return None


def compile_raw(
    path: Path,
    layout: ProjectLayout,
    context: dict[str, Any],
) -> str | None:
    """Return a file's contents unchanged."""
    try:
        if not path.is_file():
            return ""
        return path.read_text(encoding="utf-8")
    except Exception as e:
        console.error(f"Template failed (compile.raw): {path}: {e}")
        return None


COMPILERS: dict[FileKind, Strategy] = {
    FileKind.TEMPLATE: compile_template,
    FileKind.MARKDOWN: compile_markdown,
    FileKind.RAW: compile_raw,
}


def compile_file(
    source: SourceFile,
    layout: ProjectLayout,
    context: dict[str, Any] | None = None,
) -> str | None:
    """
    Compile one source file with the strategy its extension selects.

    Parameters
    ----------
    source : SourceFile
        File to compile.

    layout : ProjectLayout
        Current project layout.

    context : dict[str, Any] | None
        Extra template data, taking precedence over the user configuration.

    Returns
    -------
    str | None
        The compiled HTML, ``""`` for a missing file, or ``None`` if the
        strategy failed.
    """
    kind = classify(source.extension, layout)
    strategy = COMPILERS.get(kind)

    if strategy is None:
        console.notify(
            f"Template (include): no handler exists for "
            f"{source.extension or 'extensionless'} files. Rendering as is."
        )
        strategy = compile_raw

    return strategy(source.path, layout, dict(context or {}))


# =============================================================================
# Fragment Includer
# =============================================================================


def resolve_reference(ref: str, layout: ProjectLayout) -> Path | None:
    """
    Turn an include reference into a path under the source root.

    Namespace prefixes are dropped, a leading slash is ignored, and a
    missing extension defaults to the template extension. References
    escaping the source root return ``None``.

    Examples
    --------
    >>> resolve_reference("twig/partials/head", layout)
    PosixPath('/site/src/twig/partials/head.twig')
    """
    ref = ref.strip()
    for prefix, delimiter in NAMESPACES:
        marker = prefix + delimiter
        if ref.startswith(marker):
            ref = ref[len(marker):]
            break

    relative = Path(ref.lstrip("/\\"))
    if not relative.suffix:
        relative = relative.with_name(relative.name + layout.ext)

    source_root = layout.source.resolve()
    path = (source_root / relative).resolve()
    if not path.is_relative_to(source_root):
        console.error(f"Template (include): {ref} resolves outside {source_root}")
        return None

    return path


def include(
    ref: str,
    layout: ProjectLayout,
    context: dict[str, Any] | None = None,
) -> str:
    """
    Compile a referenced file and return its output for inlining.

    Parameters
    ----------
    ref : str
        Source-root-relative path, optionally without extension.

    layout : ProjectLayout
        Current project layout.

    context : dict[str, Any] | None
        Template data for the included file.

    Returns
    -------
    str
        The compiled content, or ``""`` when the reference is missing,
        rejected, or fails to compile.
    """
    path = resolve_reference(ref, layout)
    if path is None:
        return ""

    compiled = compile_file(SourceFile.from_path(path), layout, context)
    return compiled if compiled is not None else ""
