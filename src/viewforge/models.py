"""
viewforge.models - Pydantic Models for Project Layout
=====================================================

This module defines the data models shared by every stage of the build.
Pydantic gives us validation of the host configuration and frozen,
hashable snapshots of the project layout.

Architecture Notes
------------------
The models are organized in a hierarchy:

    GlobalConfig (host configuration, config/global.toml)
    └── ProjectLayout (snapshot handed to every component)
        ├── source / base / views / dist : Path
        ├── ext : str
        ├── globs : tuple[str, ...]
        └── config : dict (user options, config/views.toml)

    SourceFile  - one file moving through the pipeline
    FileKind    - closed set of compile strategies
    Route       - decision taken by the change router

Usage Example
-------------
>>> from viewforge.models import GlobalConfig
>>> GlobalConfig(base=Path("/site")).source_dir
PosixPath('/site/src')
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# Enumerations
# =============================================================================

class FileKind(str, Enum):
    """
    Compile strategies, selected by file extension.

    Attributes
    ----------
    TEMPLATE : str
        Files carrying the layout's template extension, rendered by Jinja2.

    MARKDOWN : str
        ``.md`` files, converted to HTML and post-processed.

    RAW : str
        Files returned verbatim (html, svg, txt).

    UNKNOWN : str
        Any other extension. Rendered as raw with an informational notice.
    """

    TEMPLATE = "template"
    MARKDOWN = "markdown"
    RAW = "raw"
    UNKNOWN = "unknown"


class RouteKind(str, Enum):
    """What the change router decided to rebuild."""

    VIEW = "view"  # the view owning the changed file's directory
    CHANGED = "changed"  # the changed file itself
    WALK = "walk"  # the whole views tree


# =============================================================================
# Configuration Models
# =============================================================================

class GlobalConfig(BaseModel):
    """
    Host configuration locating the project directories.

    Read from ``config/global.toml`` under the project base. Every field
    has a default so a project without the file still builds.

    Attributes
    ----------
    base : Path
        Project root directory.

    src : str
        Source directory, relative to ``base``.

    dist : str
        Distribution directory, relative to ``base``.

    views : str
        Entry views directory, relative to ``src``.

    ext : str
        Template file extension, including the leading dot.

    Examples
    --------
    >>> config = GlobalConfig(base=Path("/site"), ext="j2")
    >>> config.ext
    '.j2'
    """

    base: Path = Field(
        default_factory=Path.cwd,
        description="Project root directory",
    )
    src: str = Field(
        default="src",
        description="Source directory relative to base",
    )
    dist: str = Field(
        default="dist",
        description="Distribution directory relative to base",
    )
    views: str = Field(
        default="views",
        description="Entry views directory relative to src",
    )
    ext: str = Field(
        default=".twig",
        description="Template file extension",
    )

    @field_validator("ext")
    @classmethod
    def validate_ext(cls, v: str) -> str:
        """Normalize the extension to carry exactly one leading dot."""
        v = v.strip()
        if not v.strip("."):
            raise ValueError("Template extension cannot be empty")
        return "." + v.lstrip(".")

    @field_validator("src", "dist", "views")
    @classmethod
    def validate_relative(cls, v: str) -> str:
        """Directory names must stay relative to their parent."""
        if Path(v).is_absolute():
            raise ValueError(f"'{v}' must be a relative path")
        return v

    @property
    def source_dir(self) -> Path:
        """Absolute source root."""
        return self.base / self.src

    @property
    def dist_dir(self) -> Path:
        """Absolute distribution root."""
        return self.base / self.dist


class ProjectLayout(BaseModel):
    """
    Immutable snapshot of where everything lives for one build step.

    A layout is rebuilt from disk each time a component needs one (see
    :func:`viewforge.layout.options`), so edits to the configuration files
    during a watch session take effect on the next event.

    Attributes
    ----------
    source : Path
        Source root. Include references resolve against it.

    base : Path
        Namespace root bound to ``@src`` in templates. Same as ``source``.

    views : Path
        Directory holding the top-level views.

    dist : Path
        Distribution root mirroring ``views``.

    ext : str
        Template extension, e.g. ``.twig``.

    globs : tuple[str, ...]
        Patterns the watcher subscribes to, in order.

    config_file : Path
        Location of the views configuration file.

    config : dict[str, Any]
        User options from ``config/views.toml``.
    """

    model_config = ConfigDict(frozen=True)

    source: Path
    base: Path
    views: Path
    dist: Path
    ext: str = ".twig"
    globs: tuple[str, ...] = ()
    config_file: Path | None = None
    config: dict[str, Any] = Field(default_factory=dict)

    @property
    def beautify(self) -> dict[str, Any] | None:
        """
        Pretty-print options, or None when pretty-printing is disabled.

        ``beautify = true`` enables it with default options.
        """
        value = self.config.get("beautify")
        if value is True:
            return {}
        if isinstance(value, dict):
            return dict(value)
        return None

    @property
    def markdown(self) -> dict[str, Any]:
        """Keyword arguments for the markdown converter."""
        value = self.config.get("markdown")
        return dict(value) if isinstance(value, dict) else {}

    @property
    def audit_command(self) -> tuple[str, ...]:
        """Command line of the accessibility auditor."""
        audit = self.config.get("audit")
        if isinstance(audit, dict) and audit.get("command"):
            command = audit["command"]
            if isinstance(command, str):
                return tuple(command.split())
            return tuple(str(part) for part in command)
        return ("pa11y",)


# =============================================================================
# Pipeline Models
# =============================================================================

class SourceFile(BaseModel):
    """
    A file moving through the compile pipeline.

    Attributes
    ----------
    path : Path
        Absolute path of the file.

    extension : str
        Suffix including the dot, lowercase. Empty for extensionless files.
    """

    model_config = ConfigDict(frozen=True)

    path: Path
    extension: str

    @classmethod
    def from_path(cls, path: Path | str) -> SourceFile:
        path = Path(path)
        return cls(path=path, extension=path.suffix.lower())


class Route(BaseModel):
    """Decision taken by the change router for one event."""

    model_config = ConfigDict(frozen=True)

    kind: RouteKind
    target: Path
