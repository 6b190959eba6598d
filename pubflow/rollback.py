"""Best-effort rollback of the version bump commit and tag.

Rollback may be triggered before the bump step ever ran (a failed
prerequisite check, an interrupt), so it only deletes anything when the
latest tag encodes the version currently on disk and that version differs
from the one recorded before the release started. This is a heuristic: an
unrelated tag that happens to match the on-disk version would fool it.
"""

from __future__ import annotations

import threading
import warnings
from collections.abc import Callable
from concurrent.futures import Future
from typing import Generic, TypeVar

from .config import load_settings
from .errors import RollbackWarning
from .project import Project
from .vcs import Git

T = TypeVar("T")


def rollback(project: Project, git: Git, original_version: str) -> bool:
    """Delete the tag and commit created by the bump step, if it ran.

    Never raises: any failure is reported as a RollbackWarning.

    Args:
        project: The package being released.
        git: Version control operations.
        original_version: Package version before the release started.

    Returns:
        True if a tag and commit were removed.
    """
    print("\nRelease failed. Rolling back to the previous state…")
    rolled_back = False
    try:
        tag_prefix = load_settings(project).tag_prefix
        latest_tag = git.latest_tag()
        tagged_version = latest_tag.removeprefix(tag_prefix)

        # Only undo a bump that actually reached the disk and the tag list
        on_disk = project.read_version()
        if tagged_version == on_disk and tagged_version != original_version:
            git.delete_tag(latest_tag)
            git.remove_last_commit()
            rolled_back = True

        print("Successfully rolled back the project to its previous state.")
    except Exception as exc:
        warnings.warn(
            f"Couldn't roll back because of the following error:\n{exc}",
            RollbackWarning,
            stacklevel=2,
        )
    return rolled_back


class RollbackGuard(Generic[T]):
    """Run a callable at most once, sharing its result with later callers.

    The first call runs the wrapped function and stores the result in a
    Future. Later calls return that result; a call from another thread
    while the first is in flight waits for it. A re-entrant call from the
    running thread (a signal handler firing mid-rollback) returns None
    immediately.
    """

    def __init__(self, fn: Callable[[], T]) -> None:
        self._fn = fn
        self._lock = threading.RLock()
        self._future: Future[T] | None = None
        self._owner: int | None = None

    @property
    def called(self) -> bool:
        return self._future is not None

    @property
    def in_progress(self) -> bool:
        """True while the wrapped function is running on the calling thread."""
        future = self._future
        return (
            future is not None
            and not future.done()
            and self._owner == threading.get_ident()
        )

    def __call__(self) -> T | None:
        with self._lock:
            future = self._future
            first = future is None
            if first:
                future = self._future = Future()
                self._owner = threading.get_ident()

        if first:
            try:
                future.set_result(self._fn())
            except BaseException as exc:
                future.set_exception(exc)
                raise
            return future.result()

        if self.in_progress:
            return None
        if future.exception() is not None:
            return None
        return future.result()
