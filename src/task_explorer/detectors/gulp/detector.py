"""Detector for Gulp task files."""

import logging
import re
from pathlib import Path
from typing import Optional

from ...core import scanner
from ...core.config import Configuration
from ...core.detector import BaseDetector
from ...core.models import TaskDescriptor, WorkspaceFolder

logger = logging.getLogger(__name__)

GULP_GLOB = "**/[Gg]ulpfile.js"

_TASK_PATTERN = re.compile(r"""gulp\.task\(\s*["']([^"']+)["']""")


def find_gulp_tasks(content: str) -> list[str]:
    """Return unique task names passed to ``gulp.task``, in order."""
    names = []
    for match in scanner.find_pattern(content, _TASK_PATTERN, name="gulp_task"):
        name = match.groups[0].strip()
        if name and name not in names:
            logger.debug(f"Found gulp task {name}")
            names.append(name)
    return names


class GulpDetector(BaseDetector):
    """Finds tasks declared in gulpfiles."""

    async def read_tasks(
        self, path: Path, folder: WorkspaceFolder, config: Configuration
    ) -> list[TaskDescriptor]:
        content = await scanner.read_file_async(path)
        command = scanner.resolve_executable(config.get("path_to_gulp"), "gulp")

        return [
            self.target_task(path, folder, target=name, command=command, args=[name])
            for name in find_gulp_tasks(content)
        ]

    def get_metadata(self) -> dict:
        """Return detector metadata."""
        return {
            "name": "gulp",
            "version": "0.1.0",
            "description": "Tasks declared with gulp.task",
            "task_types": ["gulp"],
        }

    def get_supported_files(self, config: Optional[Configuration] = None) -> list[str]:
        """Return supported file patterns."""
        return [GULP_GLOB]
