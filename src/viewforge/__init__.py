"""
viewforge - Template Views to Static HTML
=========================================

A build-time compiler that renders template views from a project's source
tree into a static distribution tree, and can watch the sources to rebuild
only what a change affects.

Features
--------
- **Jinja2 views**: layouts and partials shared through the ``@src`` namespace
- **Markdown fragments**: ``include{{ path }}`` and ``{{ this.key }}`` markers
- **Incremental watch**: changes routed to a single view or a full rebuild
- **Pretty output**: optional re-indentation of generated HTML

Quick Start
-----------
```bash
# Build every view once
viewforge run

# Rebuild on change, targeting single views where possible
VIEWFORGE_ENV=development viewforge run --watch
```

Example
-------
>>> from viewforge import options, walk
>>> layout = options("site")
>>> walk(layout.views, layout, audit=False)
[PosixPath('.../site/dist/index.html')]

Architecture
------------
- ``layout``: project paths and configuration
- ``compiler``: compile strategies and the include function
- ``postprocess``: markdown marker rewriting
- ``writer``: distribution output
- ``walker``: view discovery and the compile-and-write pipeline
- ``watcher``: change routing and filesystem events
- ``runner``: one-shot and watch runs
- ``cli``: Typer command line
"""

# =============================================================================
# Package Metadata
# =============================================================================
__version__ = "0.1.0"

# =============================================================================
# Public API Exports
# =============================================================================

from viewforge.compiler import compile_file, include
from viewforge.layout import options
from viewforge.models import ProjectLayout, SourceFile
from viewforge.runner import run
from viewforge.walker import main, walk


__all__ = [
    "ProjectLayout",
    "SourceFile",
    "__version__",
    "compile_file",
    "include",
    "main",
    "options",
    "run",
    "walk",
]
