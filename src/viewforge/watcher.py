"""
viewforge.watcher - Change Router and Watcher
=============================================

Maps filesystem changes to the smallest rebuild that keeps the distribution
tree correct, and wires that routing to a watchdog observer.

Routing Rules
-------------
Outside development mode every change rebuilds the whole views tree, which
never misses a cross-file dependency.

In development mode (``VIEWFORGE_ENV=development``) the changed path is
classified against the current top-level views:

    src/views/accordion/extra.json   parent dir named after a view
                                     -> rebuild views/accordion.twig
    src/views/newsletter/index.twig  inside the views tree
                                     -> rebuild the changed file
    src/twig/layouts/default.twig    outside the views tree
                                     -> rebuild every view

A directory matches a view only when its name equals the view's name
exactly; ``navigation/`` does not belong to ``nav.twig``.

Event Flow
----------
watchdog observer thread
    -> ViewEventHandler (glob filter, settle window per path)
    -> ChangeRouter.handle (one event at a time)
    -> walker.main / walker.walk
"""

from __future__ import annotations

import fnmatch
import os
import threading
from collections.abc import Iterable
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver

from viewforge import console
from viewforge.layout import options
from viewforge.models import ProjectLayout, Route, RouteKind
from viewforge.walker import main, walk


# Quiet period after the last write before a change is handled
SETTLE_SECONDS = 0.75


# =============================================================================
# Routing
# =============================================================================


def list_views(layout: ProjectLayout) -> list[str]:
    """
    List the top-level view file names, read fresh from disk.

    Returns an empty list when the views directory cannot be read.
    """
    try:
        entries = os.listdir(layout.views)
    except OSError:
        return []

    return sorted(
        entry for entry in entries
        if entry.endswith(layout.ext) and (layout.views / entry).is_file()
    )


def route(
    changed: Path | str,
    layout: ProjectLayout,
    views: Iterable[str],
    *,
    development: bool,
) -> Route:
    """
    Decide what to rebuild for one changed file.

    Parameters
    ----------
    changed : Path | str
        The file that changed.

    layout : ProjectLayout
        Current project layout.

    views : Iterable[str]
        Top-level view file names, e.g. ``["accordion.twig", "index.twig"]``.

    development : bool
        Whether targeted rebuilds are enabled.

    Returns
    -------
    Route
        ``VIEW`` or ``CHANGED`` with the file to compile, or ``WALK`` with
        the views directory.

    Examples
    --------
    >>> route("/site/src/views/accordion/extra.json", layout,
    ...       ["accordion.twig"], development=True)
    Route(kind=<RouteKind.VIEW: 'view'>, target=PosixPath('/site/src/views/accordion.twig'))
    """
    changed = Path(changed)
    walk_all = Route(kind=RouteKind.WALK, target=layout.views)

    if not development:
        return walk_all

    names = {view[: -len(layout.ext)] for view in views if view.endswith(layout.ext)}
    parent = changed.parent

    if parent != layout.views and parent.name in names:
        return Route(
            kind=RouteKind.VIEW,
            target=layout.views / f"{parent.name}{layout.ext}",
        )

    if changed.is_relative_to(layout.views):
        return Route(kind=RouteKind.CHANGED, target=changed)

    return walk_all


class ChangeRouter:
    """
    Executes routing decisions for a project.

    The layout and the list of views are rebuilt for every event, so views
    added or removed during a session are picked up without a restart.
    Handling is serialised: an event waits for the previous one to finish.

    Parameters
    ----------
    base : Path | None
        Project root, passed to :func:`viewforge.layout.options`.

    audit : bool, default=True
        Run the accessibility audit on rebuilt files.

    development : bool, default=False
        Enable targeted rebuilds.
    """

    def __init__(
        self,
        base: Path | None = None,
        *,
        audit: bool = True,
        development: bool = False,
    ) -> None:
        self.base = base
        self.audit = audit
        self.development = development
        self._lock = threading.Lock()

    def handle(self, changed: Path | str) -> list[Path]:
        """Rebuild whatever ``changed`` affects; returns written artifacts."""
        with self._lock:
            layout = options(self.base)
            views = list_views(layout)

            console.watching(f"Detected change on {console.path_str(changed)}")

            decision = route(changed, layout, views, development=self.development)

            if decision.kind is RouteKind.WALK:
                return walk(decision.target, layout, audit=self.audit)

            dist = main(decision.target, layout, audit=self.audit)
            return [dist] if dist is not None else []


# =============================================================================
# Filesystem Events
# =============================================================================


def matches_globs(path: Path | str, globs: Iterable[str]) -> bool:
    """
    Whether ``path`` matches any watch pattern.

    ``**/`` also matches zero directories, so ``src/**/*.md`` matches
    ``src/readme.md``.
    """
    candidate = Path(path).as_posix()
    for pattern in globs:
        pattern = pattern.replace("\\", "/")
        if fnmatch.fnmatchcase(candidate, pattern):
            return True
        if fnmatch.fnmatchcase(candidate, pattern.replace("/**/", "/")):
            return True
    return False


class ViewEventHandler(FileSystemEventHandler):
    """
    watchdog handler feeding matching changes to a :class:`ChangeRouter`.

    A change is handled once its file has been quiet for ``settle``
    seconds; another write to the same path restarts the wait.
    """

    def __init__(
        self,
        router: ChangeRouter,
        globs: Iterable[str],
        settle: float = SETTLE_SECONDS,
    ) -> None:
        super().__init__()
        self.router = router
        self.globs = tuple(globs)
        self.settle = settle
        self._timers: dict[str, threading.Timer] = {}
        self._lock = threading.Lock()

    def _schedule(self, path: str) -> None:
        if not matches_globs(path, self.globs):
            return

        with self._lock:
            timer = self._timers.pop(path, None)
            if timer is not None:
                timer.cancel()
            timer = threading.Timer(self.settle, self._dispatch, args=(path,))
            timer.daemon = True
            self._timers[path] = timer
            timer.start()

    def _dispatch(self, path: str) -> None:
        with self._lock:
            self._timers.pop(path, None)
        try:
            self.router.handle(path)
        except Exception as e:
            # Keep the session alive, e.g. after saving a malformed views.toml
            console.error(f"Template failed (watch): {path}: {e}")

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._schedule(str(event.src_path))

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._schedule(str(event.src_path))

    def on_moved(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._schedule(str(event.dest_path))

    def cancel(self) -> None:
        """Drop changes still waiting for their settle window."""
        with self._lock:
            for timer in self._timers.values():
                timer.cancel()
            self._timers.clear()


def watch(
    base: Path | None = None,
    *,
    audit: bool = True,
    development: bool = False,
    settle: float = SETTLE_SECONDS,
) -> tuple[BaseObserver, ViewEventHandler]:
    """
    Start watching a project and rebuilding on change.

    Parameters
    ----------
    base : Path | None
        Project root.

    audit : bool, default=True
        Run the accessibility audit on rebuilt files.

    development : bool, default=False
        Enable targeted rebuilds.

    settle : float
        Quiet period, in seconds, before a change is handled.

    Returns
    -------
    tuple[BaseObserver, ViewEventHandler]
        The running observer and its handler. Call ``handler.cancel()``,
        then ``observer.stop()`` and ``observer.join()`` to end it.
    """
    layout = options(base)
    router = ChangeRouter(base, audit=audit, development=development)
    handler = ViewEventHandler(router, layout.globs, settle=settle)

    observer = Observer()
    observer.schedule(handler, str(layout.source), recursive=True)
    if layout.config_file is not None and layout.config_file.parent.is_dir():
        observer.schedule(handler, str(layout.config_file.parent), recursive=False)
    observer.start()

    console.watching(f"Template watching [yellow]{', '.join(layout.globs)}[/]")

    return observer, handler
