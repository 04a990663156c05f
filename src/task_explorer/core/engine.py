"""Task engine: owns the detectors and their caches and builds the task tree."""

import importlib
import inspect
import logging
from pathlib import Path
from typing import Awaitable, Callable, Iterable, Optional, Union

from .cache import FormatCache
from .config import GLOBAL_SCAN_KEYS, Configuration
from .detector import BaseDetector
from .models import TaskDescriptor, TreeFile, Workspace
from .tree import TreeResult, build_tree
from .watcher import FileEvent, PollingWatcher

logger = logging.getLogger(__name__)

# A host provider returns descriptors it discovered itself (sync or async)
TaskProvider = Callable[[], Union[list[TaskDescriptor], Awaitable[list[TaskDescriptor]]]]


class TaskEngine:
    """Aggregates descriptors from every detector and builds the tree."""

    # Detector registry (hardcoded)
    DETECTOR_REGISTRY = {
        "ant": "task_explorer.detectors.ant",
        "app-publisher": "task_explorer.detectors.app_publisher",
        "gradle": "task_explorer.detectors.gradle",
        "grunt": "task_explorer.detectors.grunt",
        "gulp": "task_explorer.detectors.gulp",
        "make": "task_explorer.detectors.make",
        "npm": "task_explorer.detectors.npm",
        "script": "task_explorer.detectors.script",
        "tsc": "task_explorer.detectors.tsc",
        "workspace": "task_explorer.detectors.workspace",
    }

    def __init__(
        self,
        workspace: Workspace,
        config: Optional[Configuration] = None,
        detectors: Optional[Iterable[str]] = None,
    ):
        """
        Initialize the engine and load detectors.

        Args:
            workspace: Folders to explore
            config: Active configuration (None = defaults)
            detectors: Optional detector names to load (None = all)
        """
        self.workspace = workspace
        self.config = config or Configuration()
        self.detectors: dict[str, BaseDetector] = {}
        self.caches: dict[str, FormatCache] = {}
        self.providers: dict[str, TaskProvider] = {}
        self.tree: Optional[TreeResult] = None
        self._refresh_generation = 0
        self._load_detectors(detectors)

    def _load_detectors(self, names: Optional[Iterable[str]]) -> None:
        """
        Load registered detectors.

        Each detector module must expose a DETECTOR_CLASS variable pointing
        to the detector class.
        """
        wanted = set(names) if names is not None else None
        if wanted:
            for name in sorted(wanted - self.DETECTOR_REGISTRY.keys()):
                logger.warning(f"Detector '{name}' not found, skipping")

        for name, module_path in self.DETECTOR_REGISTRY.items():
            if wanted is not None and name not in wanted:
                continue
            try:
                module = importlib.import_module(module_path)
                detector_class = getattr(module, "DETECTOR_CLASS")
                self.add_detector(detector_class())
                logger.info(f"Loaded detector: {name}")
            except Exception as e:
                logger.error(f"Failed to load detector {name}: {e}")
                # Continue loading other detectors

    def add_detector(self, detector: BaseDetector) -> None:
        """Register a detector instance with a fresh cache."""
        self.detectors[detector.name] = detector
        self.caches[detector.name] = FormatCache(detector)

    def register_provider(self, name: str, provider: TaskProvider) -> None:
        """
        Register a host task provider.

        Providers contribute descriptors for types the engine does not scan
        itself; their results are not cached.
        """
        self.providers[name] = provider

    def list_detectors(self) -> list[dict]:
        """
        Get metadata for all loaded detectors.

        Returns:
            List of detector metadata dictionaries
        """
        return [detector.get_metadata() for detector in self.detectors.values()]

    def detector_for_file(self, path) -> Optional[BaseDetector]:
        """Return the first enabled detector whose globs match a file."""
        path = Path(path).resolve()
        folder = self.workspace.folder_for(path)
        if folder is None:
            return None
        for detector in self.detectors.values():
            if detector.is_enabled(self.config) and detector.accepts(path, folder, self.config):
                return detector
        return None

    def install_types(self) -> set[str]:
        """Task types whose ``install`` task is driven by an install helper."""
        types = set()
        for detector in self.detectors.values():
            if detector.get_metadata().get("install_helper"):
                types.update(detector.task_types())
        return types

    async def provide_tasks(self, detector: str) -> list[TaskDescriptor]:
        """
        Return the cached descriptors of one detector, scanning on first use.

        Args:
            detector: Detector name

        Returns:
            Descriptors (empty for unknown or disabled detectors)
        """
        cache = self.caches.get(detector)
        if cache is None:
            logger.warning(f"Detector '{detector}' not found")
            return []
        if not cache.detector.is_enabled(self.config):
            return []
        return await cache.get(self.workspace, self.config)

    async def invalidate_cache(
        self, detector: Optional[str] = None, changed_file=None
    ) -> None:
        """
        Invalidate caches in full or for one file.

        Args:
            detector: Detector whose cache to invalidate (None = all)
            changed_file: Restrict the invalidation to this file; without a
                detector name it goes to the detector that owns the file
        """
        if detector is None and changed_file is not None:
            owner = self.detector_for_file(changed_file)
            if owner is None:
                logger.debug(f"No detector owns {changed_file}, nothing to invalidate")
                return
            caches = [self.caches[owner.name]]
        elif detector is None:
            caches = list(self.caches.values())
        elif detector in self.caches:
            caches = [self.caches[detector]]
        else:
            logger.warning(f"Cannot invalidate unknown detector '{detector}'")
            return

        for cache in caches:
            if changed_file is None:
                cache.invalidate()
            else:
                await cache.update_file(changed_file, self.workspace, self.config)

    async def collect_tasks(self) -> list[TaskDescriptor]:
        """
        Merge descriptors from every enabled detector and host provider.

        A failing detector or provider is logged and contributes nothing.

        Returns:
            Descriptors whose type is enabled
        """
        all_tasks = []

        for name in self.detectors:
            try:
                all_tasks.extend(await self.provide_tasks(name))
            except Exception as e:
                logger.error(f"Detector {name} failed: {e}")

        for name, provider in self.providers.items():
            try:
                result = provider()
                if inspect.isawaitable(result):
                    result = await result
                all_tasks.extend(result or [])
            except Exception as e:
                logger.error(f"Task provider {name} failed: {e}")

        return [task for task in all_tasks if self.config.is_enabled(task.type)]

    async def refresh(
        self,
        invalidate: Union[bool, str, None] = None,
        running: Iterable[str] = (),
        paused: Iterable[str] = (),
    ) -> TreeResult:
        """
        Rebuild the task tree.

        A refresh that completes after a newer one has started is not
        published; :attr:`tree` keeps the newer result.

        Args:
            invalidate: True to invalidate every cache first, or the name
                of one detector whose cache to invalidate
            running: Ids of tasks currently executing
            paused: Ids of running tasks stopped at a breakpoint

        Returns:
            The tree built by this refresh
        """
        self._refresh_generation += 1
        generation = self._refresh_generation

        if invalidate is True:
            await self.invalidate_cache()
        elif isinstance(invalidate, str):
            await self.invalidate_cache(invalidate)

        descriptors = await self.collect_tasks()
        tree = build_tree(
            descriptors,
            self.workspace,
            self.config,
            running=running,
            install_types=self.install_types(),
            paused=paused,
        )

        if generation != self._refresh_generation:
            logger.debug(f"Discarding refresh {generation}, newer refresh started")
            return tree

        self.tree = tree
        return tree

    async def handle_file_event(self, event: FileEvent) -> None:
        """Apply a watcher event to the owning detector's cache."""
        cache = self.caches.get(event.detector)
        if cache is None:
            logger.debug(f"No cache for {event.detector}, ignoring {event.path}")
            return
        logger.info(f"File {event.kind}: {event.path}")
        await cache.update_file(event.path, self.workspace, self.config)

    def apply_configuration(self, config: Configuration) -> set[str]:
        """
        Switch to a new configuration, invalidating the affected caches.

        Exclusion changes invalidate every cache; enable flags, executable
        overrides and include globs invalidate only their detector.

        Returns:
            Names of the invalidated detectors
        """
        changed = self.config.changed_keys(config)
        self.config = config
        if not changed:
            return set()

        if changed & GLOBAL_SCAN_KEYS:
            affected = set(self.caches)
        else:
            affected = {
                name
                for name, detector in self.detectors.items()
                if changed & _scan_keys(detector)
            }

        for name in sorted(affected):
            self.caches[name].invalidate()
        logger.info(f"Configuration changed ({', '.join(sorted(changed))})")
        return affected

    def install_task(self, tree_file: TreeFile) -> Optional[TaskDescriptor]:
        """
        Return the install helper task for a file node.

        Returns:
            Descriptor, or None if the file's type has no install helper
        """
        if tree_file.is_group or tree_file.resource_path is None:
            return None
        folder = self.workspace.get(tree_file.folder_name)
        if folder is None:
            return None

        for detector in self.detectors.values():
            if not detector.get_metadata().get("install_helper"):
                continue
            if tree_file.type in detector.task_types():
                return detector.install_task(tree_file.resource_path, folder)
        return None

    def create_watcher(self) -> PollingWatcher:
        """Create a watcher over the files of every loaded detector."""
        return PollingWatcher(self.detectors.values(), self.workspace, self.config)


def _scan_keys(detector: BaseDetector) -> set[str]:
    """Configuration keys that change what a detector produces."""
    suffixes = {t.replace("-", "_") for t in [detector.name, *detector.task_types()]}
    keys = {f"include_{s}" for s in suffixes}
    for suffix in suffixes:
        keys.add(f"enable_{suffix}")
        keys.add(f"path_to_{suffix}")
    return keys
