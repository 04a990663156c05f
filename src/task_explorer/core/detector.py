"""Base detector interface for task file scanners."""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from .config import Configuration
from .errors import ParseError
from .models import (
    Invocation,
    TargetPayload,
    TaskDescriptor,
    Workspace,
    WorkspaceFolder,
)
from .scanner import find_files_by_glob, is_excluded, matches_glob, relative_dir

logger = logging.getLogger(__name__)


class BaseDetector(ABC):
    """
    Abstract base class for all task detectors.

    A detector knows which files hold tasks of its format (globs) and how to
    turn one such file into TaskDescriptors. Walking the workspace, skipping
    excluded and vanished files, and isolating per-file failures is shared.
    """

    @abstractmethod
    def get_metadata(self) -> dict:
        """
        Return detector metadata.

        Returns:
            Dictionary with keys:
            - name (str): Detector name, also the cache key (e.g. "ant")
            - version (str): Detector version
            - description (str): What the detector finds
            - task_types (list[str]): Task types it can produce
            - install_helper (bool, optional): Type defines an install task

        Example:
            ```python
            def get_metadata(self) -> dict:
                return {
                    "name": "ant",
                    "version": "0.1.0",
                    "description": "Ant build.xml targets",
                    "task_types": ["ant"],
                }
            ```
        """
        ...

    @abstractmethod
    def get_supported_files(self, config: Optional[Configuration] = None) -> list[str]:
        """
        Return folder-relative glob patterns for files this detector reads.

        Args:
            config: Active configuration (some detectors add configured globs)

        Returns:
            List of glob patterns (e.g. ['**/[Bb]uild.xml'])
        """
        ...

    @abstractmethod
    async def read_tasks(
        self, path: Path, folder: WorkspaceFolder, config: Configuration
    ) -> list[TaskDescriptor]:
        """
        Extract the tasks declared in one file.

        Implementations may raise OSError when the file cannot be read and
        ParseError when its content is malformed; :meth:`scan_file` turns
        both into an empty result.

        Args:
            path: Absolute path of the file
            folder: Workspace folder owning the file
            config: Active configuration

        Returns:
            Descriptors for every task found in the file
        """
        ...

    @property
    def name(self) -> str:
        return self.get_metadata()["name"]

    def task_types(self) -> list[str]:
        """Task types this detector can produce."""
        return list(self.get_metadata().get("task_types", [self.name]))

    def is_enabled(self, config: Configuration) -> bool:
        """A detector runs when at least one of its task types is enabled."""
        return any(config.is_enabled(t) for t in self.task_types())

    def include_glob(self, config: Optional[Configuration] = None) -> str:
        """Combine the supported globs into one brace alternation."""
        globs = self.get_supported_files(config)
        if len(globs) == 1:
            return globs[0]
        return "{" + ",".join(globs) + "}"

    def accepts(self, path: Path, folder: WorkspaceFolder, config: Configuration) -> bool:
        """
        Return True if a file belongs to this detector.

        Used for watcher events, which arrive for single files.
        """
        try:
            rel_path = Path(path).relative_to(folder.path).as_posix()
        except ValueError:
            return False
        if not matches_glob(rel_path, self.include_glob(config)):
            return False
        return not (is_excluded(path, config.exclude) or is_excluded(rel_path, config.exclude))

    async def scan(self, workspace: Workspace, config: Configuration) -> list[TaskDescriptor]:
        """
        Run a full scan of every workspace folder.

        Never raises for a single bad file; such files contribute nothing.

        Args:
            workspace: Folders to scan
            config: Active configuration

        Returns:
            Descriptors for every task found
        """
        tasks = []
        visited: set[Path] = set()
        include = self.include_glob(config)

        for folder in workspace.folders:
            try:
                paths = find_files_by_glob(folder.path, include, excludes=config.exclude)
            except OSError as e:
                logger.error(f"Cannot search {folder.path} for {self.name} files: {e}")
                continue

            for path in paths:
                if path in visited or not self.accepts(path, folder, config):
                    continue
                visited.add(path)
                tasks.extend(await self.scan_file(path, workspace, config))

        logger.info(f"Detector {self.name} found {len(tasks)} task(s)")
        return tasks

    async def scan_file(
        self, path: Path, workspace: Workspace, config: Configuration
    ) -> list[TaskDescriptor]:
        """
        Read one file, isolating any failure.

        Args:
            path: Absolute file path
            workspace: Workspace used to find the owning folder
            config: Active configuration

        Returns:
            Descriptors from the file, or an empty list on any error
        """
        folder = workspace.folder_for(path)
        if folder is None:
            logger.debug(f"{path} is outside the workspace, skipping")
            return []

        try:
            tasks = await self.read_tasks(Path(path), folder, config)
            logger.debug(f"{self.name}: {len(tasks)} task(s) in {path}")
            return tasks
        except FileNotFoundError:
            logger.debug(f"{path} vanished before it could be read")
        except OSError as e:
            logger.warning(f"Could not read {path}: {e}")
        except ParseError as e:
            logger.warning(f"Skipping {path}: {e.reason}")
        except Exception as e:
            logger.error(f"Detector {self.name} failed on {path}: {e}")

        return []

    def target_task(
        self,
        path: Path,
        folder: WorkspaceFolder,
        target: str,
        command: str,
        args: list[str],
        name: Optional[str] = None,
        task_type: Optional[str] = None,
        is_default: bool = False,
    ) -> TaskDescriptor:
        """Build a descriptor for a named target inside a build file."""
        return TaskDescriptor(
            type=task_type or self.name,
            name=name or target,
            detector=self.name,
            folder_name=folder.name,
            source_file=path,
            relative_path=relative_dir(path, folder.path),
            invocation=Invocation(command=command, args=args, cwd=path.parent),
            is_default=is_default,
            payload=TargetPayload(target=target, file_name=path.name),
        )
