"""
pytest configuration and shared fixtures for viewforge tests.

This module provides fixtures and configuration used across all test modules.
Fixtures defined here are automatically available to all tests.

Fixtures
--------
project : Path
    A temporary project root with a views tree, shared layouts and an
    empty distribution directory.

layout : ProjectLayout
    The layout snapshot for ``project``.

make_file : Callable[[Path, str], Path]
    Writes a file, creating its parent directories.
"""

from pathlib import Path

import pytest

from viewforge.layout import options
from viewforge.models import ProjectLayout


def write_file(path: Path, text: str) -> Path:
    """Write ``text`` to ``path``, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


DEFAULT_LAYOUT = """<!DOCTYPE html>
<html>
<body>
{% block content %}{% endblock %}
</body>
</html>
"""


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """
    Create a minimal project tree.

    Layout::

        config/views.toml
        src/views/index.twig
        src/twig/layouts/default.twig
        src/twig/partials/head.twig
        dist/

    Returns
    -------
    Path
        The project root.
    """
    base = tmp_path / "site"
    write_file(
        base / "config" / "views.toml",
        '[site]\nname = "Acme"\n',
    )
    write_file(base / "src" / "twig" / "layouts" / "default.twig", DEFAULT_LAYOUT)
    write_file(
        base / "src" / "twig" / "partials" / "head.twig",
        "<title>{{ site.name }}</title>",
    )
    write_file(
        base / "src" / "views" / "index.twig",
        "{% extends '@src/twig/layouts/default.twig' %}\n"
        "{% block content %}<h1>{{ site.name }}</h1>{% endblock %}\n",
    )
    (base / "dist").mkdir()
    return base.resolve()


@pytest.fixture
def layout(project: Path) -> ProjectLayout:
    """Layout snapshot for the ``project`` fixture."""
    return options(project)


@pytest.fixture
def make_file():
    """Provide :func:`write_file` to tests."""
    return write_file

