"""Detector for Gradle build scripts.

Task names are found by scanning lines, not by parsing Groovy: a task is a
line starting with ``task `` whose name ends at the next ``(`` or ``{`` on
the same line. Declarations that open on a later line are not recognised.
"""

import logging
from pathlib import Path
from typing import Optional

from ...core import scanner
from ...core.config import Configuration
from ...core.detector import BaseDetector
from ...core.models import TaskDescriptor, WorkspaceFolder

logger = logging.getLogger(__name__)

GRADLE_GLOB = "**/*.[Gg][Rr][Aa][Dd][Ll][Ee]"


def find_gradle_tasks(content: str) -> list[str]:
    """
    Extract task names from Gradle script content.

    Args:
        content: Raw file content

    Returns:
        Unique task names in order of appearance
    """
    names = []

    for _, raw_line in scanner.iter_lines(content):
        line = raw_line.strip()
        if not line.lower().startswith("task "):
            continue

        start = line.find(" ") + 1
        ends = [i for i in (line.find("(", start), line.find("{", start)) if i != -1]
        if not ends:
            # Multi-line declaration, not supported
            continue

        name = line[start:min(ends)].strip()
        if name and name not in names:
            logger.debug(f"Found gradle task {name}")
            names.append(name)

    return names


class GradleDetector(BaseDetector):
    """Finds ``task`` declarations in Gradle scripts below the folder root."""

    def accepts(self, path: Path, folder: WorkspaceFolder, config: Configuration) -> bool:
        # Root level scripts belong to the build tool's own task provider
        if Path(path).parent == folder.path:
            return False
        return super().accepts(path, folder, config)

    async def read_tasks(
        self, path: Path, folder: WorkspaceFolder, config: Configuration
    ) -> list[TaskDescriptor]:
        content = await scanner.read_file_async(path)
        command = self._gradle_executable(config)

        return [
            self.target_task(path, folder, target=name, command=command, args=[name])
            for name in find_gradle_tasks(content)
        ]

    def _gradle_executable(self, config: Configuration) -> str:
        default = "gradle.bat" if scanner.is_windows() else "gradle"
        return scanner.resolve_executable(config.path_to_gradle, default)

    def get_metadata(self) -> dict:
        """Return detector metadata."""
        return {
            "name": "gradle",
            "version": "0.1.0",
            "description": "Task declarations in Gradle build scripts",
            "task_types": ["gradle"],
        }

    def get_supported_files(self, config: Optional[Configuration] = None) -> list[str]:
        """Return supported file patterns."""
        return [GRADLE_GLOB]
