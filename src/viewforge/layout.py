"""
viewforge.layout - Path Resolver
================================

Derives the :class:`~viewforge.models.ProjectLayout` for a project from its
configuration files:

    <base>/config/global.toml   directory names and template extension
    <base>/config/views.toml    user options (beautify, markdown, data)

Both files are optional. Nothing is cached: :func:`options` reads the files
again on every call, which is what lets a long watch session pick up edits
to the configuration without a restart.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import tomlkit
from pydantic import ValidationError
from tomlkit.exceptions import TOMLKitError

from viewforge.exceptions import ConfigError
from viewforge.models import GlobalConfig, ProjectLayout


CONFIG_DIR = "config"
GLOBAL_CONFIG_FILE = "global.toml"
VIEWS_CONFIG_FILE = "views.toml"


# =============================================================================
# TOML Helpers
# =============================================================================


def _read_toml(path: Path) -> dict[str, Any]:
    """Read a TOML file into plain Python containers, {} when missing."""
    if not path.exists():
        return {}
    try:
        with path.open(encoding="utf-8") as f:
            return tomlkit.load(f).unwrap()
    except (OSError, TOMLKitError) as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e


# =============================================================================
# Configuration Loading
# =============================================================================


def config_path(base: Path, name: str) -> Path:
    """Location of a configuration file under the project base."""
    return base / CONFIG_DIR / name


def load_global_config(base: Path) -> GlobalConfig:
    """
    Load the host configuration for a project.

    Parameters
    ----------
    base : Path
        Project root directory.

    Returns
    -------
    GlobalConfig
        The configuration, with defaults for anything the file leaves out.

    Raises
    ------
    ConfigError
        If the file is malformed or holds invalid values.
    """
    data = _read_toml(config_path(base, GLOBAL_CONFIG_FILE))

    # A nested [entry] table mirrors the host's `entry.views` key
    entry = data.pop("entry", None)
    if isinstance(entry, dict) and "views" in entry and "views" not in data:
        data["views"] = entry["views"]

    try:
        return GlobalConfig(base=base, **data)
    except (ValidationError, TypeError) as e:
        raise ConfigError(f"Invalid {GLOBAL_CONFIG_FILE}: {e}") from e


def load_views_config(base: Path) -> dict[str, Any]:
    """Load the user options from ``config/views.toml`` ({} when missing)."""
    return _read_toml(config_path(base, VIEWS_CONFIG_FILE))


def options(base: Path | str | None = None) -> ProjectLayout:
    """
    Build a fresh project layout snapshot.

    Parameters
    ----------
    base : Path | str | None
        Project root. Defaults to the current working directory.

    Returns
    -------
    ProjectLayout
        Absolute locations, watch globs and user configuration.

    Examples
    --------
    >>> layout = options("/site")
    >>> layout.views
    PosixPath('/site/src/views')
    >>> layout.globs[1]
    '/site/src/**/*.twig'
    """
    base = Path(base).resolve() if base is not None else Path.cwd()
    settings = load_global_config(base)
    source = settings.source_dir
    views_file = config_path(base, VIEWS_CONFIG_FILE)

    return ProjectLayout(
        source=source,
        base=source,
        views=source / settings.views,
        dist=settings.dist_dir,
        ext=settings.ext,
        globs=(
            str(views_file),
            f"{source}/**/*{settings.ext}",
            f"{source}/**/*.md",
        ),
        config_file=views_file,
        config=load_views_config(base),
    )
