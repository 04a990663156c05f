"""Poll-based file watcher producing create/change/delete events per detector.

Each poll re-enumerates the files matching every detector's globs and
compares cheap stat signatures with the previous poll.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Literal

from .config import Configuration
from .detector import BaseDetector
from .models import Workspace
from .scanner import find_files_by_glob

logger = logging.getLogger(__name__)

EventKind = Literal["create", "change", "delete"]


@dataclass(frozen=True)
class FileEvent:
    """One file change routed to the detector whose globs matched it."""

    kind: EventKind
    path: Path
    detector: str


def _path_stat_signature(path: Path) -> tuple[str, int, int]:
    """Return a stat tuple describing ``path`` existence and metadata."""
    try:
        st = path.stat()
    except FileNotFoundError:
        return ("missing", 0, 0)
    except OSError:
        return ("error", 0, 0)
    return ("ok", st.st_mtime_ns, st.st_size)


class PollingWatcher:
    """
    Watches the task files of a set of detectors.

    The first :meth:`poll` (or :meth:`prime`) records the current state and
    reports nothing; later polls report the difference.
    """

    def __init__(
        self,
        detectors: Iterable[BaseDetector],
        workspace: Workspace,
        config: Configuration,
    ):
        self.detectors = list(detectors)
        self.workspace = workspace
        self.config = config
        self._signatures: dict[tuple[str, Path], tuple[str, int, int]] | None = None

    def update_configuration(self, config: Configuration) -> None:
        """Use new globs/excludes; the next poll re-baselines silently."""
        self.config = config
        self._signatures = None

    def prime(self) -> None:
        """Record the current state without emitting events."""
        self._signatures = self._snapshot()

    def poll(self) -> list[FileEvent]:
        """
        Compare the file system with the previous poll.

        Returns:
            Events ordered deletes last, each list sorted by path
        """
        current = self._snapshot()
        previous = self._signatures
        self._signatures = current

        if previous is None:
            return []

        events = []
        for key in sorted(current.keys() - previous.keys(), key=_event_sort_key):
            events.append(FileEvent("create", key[1], key[0]))
        for key in sorted(current.keys() & previous.keys(), key=_event_sort_key):
            if current[key] != previous[key]:
                events.append(FileEvent("change", key[1], key[0]))
        for key in sorted(previous.keys() - current.keys(), key=_event_sort_key):
            events.append(FileEvent("delete", key[1], key[0]))

        for event in events:
            logger.debug(f"{event.kind}: {event.path} ({event.detector})")
        return events

    def _snapshot(self) -> dict[tuple[str, Path], tuple[str, int, int]]:
        signatures = {}
        for detector in self.detectors:
            if not detector.is_enabled(self.config):
                continue
            include = detector.include_glob(self.config)
            for folder in self.workspace.folders:
                try:
                    paths = find_files_by_glob(folder.path, include, excludes=self.config.exclude)
                except OSError as e:
                    logger.warning(f"Cannot watch {folder.path}: {e}")
                    continue
                for path in paths:
                    signature = _path_stat_signature(path)
                    if signature[0] == "ok":
                        signatures[(detector.name, path)] = signature
        return signatures


def _event_sort_key(key: tuple[str, Path]) -> tuple[str, str]:
    return (str(key[1]), key[0])
