"""Tracking and cleanup of transient files created for one image.

Every file written while an image is being processed is registered with
the :class:`RunScope` of that image. The scope is released exactly once,
on every exit path, and deletes whatever it tracked. Deletion is best
effort: a failure for one file is logged as a
:class:`~faceswap.errors.CleanupWarning` and the remaining files are
still attempted.

Example::

    tracker = TempResourceTracker()
    with tracker.begin() as scope:
        scope.track(path)
        ...
"""

from __future__ import annotations

import logging
import os
from typing import Callable, List, Optional

from faceswap.errors import CleanupWarning

logger = logging.getLogger(__name__)


class RunScope:
    """Registry of transient handles owned by a single image run."""

    def __init__(self, remover: Callable[[str], None] = os.remove) -> None:
        self._remover = remover
        self._handles: List[str] = []
        self._released = False

    @property
    def remaining(self) -> List[str]:
        """Handles tracked and not yet released."""
        return list(self._handles)

    @property
    def released(self) -> bool:
        return self._released

    def track(self, handle: str) -> str:
        """Register ``handle`` for deletion and return it."""
        if self._released:
            raise RuntimeError("cannot track resources on a released scope")
        self._handles.append(handle)
        return handle

    def release_all(self) -> List[CleanupWarning]:
        """Delete every tracked handle.

        Only the first call does any work. Files that are already gone
        count as deleted. No delete error escapes, so an error already
        propagating through the owning ``with`` block is never replaced.

        Returns:
            One warning per handle that could not be removed.
        """
        if self._released:
            return []
        self._released = True

        handles, self._handles = self._handles, []
        if handles:
            logger.info("Cleaning up tmp files %s", handles)

        warnings: List[CleanupWarning] = []
        for handle in handles:
            try:
                self._remover(handle)
            except FileNotFoundError:
                logger.debug("Tmp file already removed: %s", handle)
            except Exception as exc:
                warning = CleanupWarning(handle, exc)
                logger.warning("%s", warning)
                warnings.append(warning)
        return warnings

    def __enter__(self) -> "RunScope":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release_all()


class TempResourceTracker:
    """Factory for per-run scopes.

    The tracker holds no state shared between runs, so a single instance
    can serve any number of concurrent images.
    """

    def __init__(self, remover: Optional[Callable[[str], None]] = None) -> None:
        self._remover = remover or os.remove

    def begin(self) -> RunScope:
        return RunScope(self._remover)
