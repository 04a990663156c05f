"""Per-detector task cache with lazy population and incremental updates."""

import asyncio
import logging
from pathlib import Path
from typing import Iterable, Optional

from .config import Configuration
from .detector import BaseDetector
from .models import TaskDescriptor, Workspace

logger = logging.getLogger(__name__)


def dedupe_tasks(tasks: Iterable[TaskDescriptor]) -> list[TaskDescriptor]:
    """
    Drop duplicate descriptors; a later duplicate replaces the earlier one.

    Args:
        tasks: Descriptors in arrival order

    Returns:
        Descriptors with unique (type, source_file, name) identities
    """
    by_identity: dict[tuple[str, str, str], TaskDescriptor] = {}
    for task in tasks:
        by_identity.pop(task.identity, None)
        by_identity[task.identity] = task
    return list(by_identity.values())


class FormatCache:
    """
    Descriptors produced by one detector's most recent scan.

    The cache starts unpopulated and runs a full scan on first request.
    Every mutation (full rebuild or single-file update) goes through one
    lock, so updates for the same detector are applied in arrival order and
    an update that arrives during a rebuild is applied after it. The task
    list is replaced, never mutated in place, so readers always see a
    complete list.
    """

    def __init__(self, detector: BaseDetector):
        self.detector = detector
        self._tasks: Optional[list[TaskDescriptor]] = None
        self._lock = asyncio.Lock()
        self._generation = 0
        self.rebuild_count = 0

    @property
    def name(self) -> str:
        return self.detector.name

    @property
    def populated(self) -> bool:
        return self._tasks is not None

    def snapshot(self) -> list[TaskDescriptor]:
        """Current descriptors without triggering a scan."""
        return list(self._tasks or [])

    async def get(self, workspace: Workspace, config: Configuration) -> list[TaskDescriptor]:
        """
        Return cached descriptors, scanning the workspace on first use.

        Args:
            workspace: Folders to scan
            config: Active configuration

        Returns:
            Copy of the cached descriptor list
        """
        if self._tasks is None:
            await self.rebuild(workspace, config, only_if_empty=True)
        return self.snapshot()

    async def rebuild(
        self, workspace: Workspace, config: Configuration, only_if_empty: bool = False
    ) -> None:
        """
        Run a full scan and swap in the result.

        A rebuild whose cache was invalidated while it ran is discarded, as
        its result was computed from outdated settings.
        """
        async with self._lock:
            if only_if_empty and self._tasks is not None:
                return

            generation = self._generation
            tasks = dedupe_tasks(await self.detector.scan(workspace, config))

            if generation != self._generation:
                logger.debug(f"Discarding stale {self.name} rebuild")
                return

            self._tasks = tasks
            self.rebuild_count += 1
            logger.debug(f"Cache {self.name} rebuilt with {len(tasks)} task(s)")

    def invalidate(self) -> None:
        """Drop everything; the next request runs a full scan."""
        logger.debug(f"Invalidating cache {self.name}")
        self._generation += 1
        self._tasks = None

    async def update_file(
        self, path: Path, workspace: Workspace, config: Configuration
    ) -> None:
        """
        Apply a create/change/delete event for one file.

        Descriptors from the file, and any whose file no longer exists, are
        removed; if the file still exists it is re-read and its descriptors
        added. Events for files unknown to the cache are inserts (or no-ops
        for deletes). An unpopulated cache is left alone since its next scan
        will see the change anyway.

        Args:
            path: File reported by the watcher
            workspace: Workspace used to find the owning folder
            config: Active configuration
        """
        path = Path(path).resolve()

        async with self._lock:
            if self._tasks is None:
                return

            generation = self._generation

            kept = []
            for task in self._tasks:
                if task.source_file == path or not task.source_file.exists():
                    logger.debug(f"Removing old task {task.name} ({task.source_file})")
                    continue
                kept.append(task)

            folder = workspace.folder_for(path)
            if path.exists() and folder is not None and self.detector.accepts(path, folder, config):
                kept.extend(await self.detector.scan_file(path, workspace, config))

            if generation != self._generation:
                logger.debug(f"Discarding stale {self.name} update for {path}")
                return

            if not kept:
                # Empty caches fall back to a full scan on the next request
                self._tasks = None
                return

            self._tasks = dedupe_tasks(kept)
