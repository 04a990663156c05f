"""Detector for Grunt task files."""

import logging
import re
from pathlib import Path
from typing import Optional

from ...core import scanner
from ...core.config import Configuration
from ...core.detector import BaseDetector
from ...core.models import TaskDescriptor, WorkspaceFolder

logger = logging.getLogger(__name__)

GRUNT_GLOB = "**/[Gg]runtfile.js"

_TASK_PATTERN = re.compile(r"""grunt\.registerTask\(\s*["']([^"']+)["']""")


def find_grunt_tasks(content: str) -> list[str]:
    """Return unique task names passed to ``grunt.registerTask``, in order."""
    names = []
    for match in scanner.find_pattern(content, _TASK_PATTERN, name="grunt_task"):
        name = match.groups[0].strip()
        if name and name not in names:
            logger.debug(f"Found grunt task {name}")
            names.append(name)
    return names


class GruntDetector(BaseDetector):
    """Finds tasks declared in gruntfiles."""

    async def read_tasks(
        self, path: Path, folder: WorkspaceFolder, config: Configuration
    ) -> list[TaskDescriptor]:
        content = await scanner.read_file_async(path)
        command = scanner.resolve_executable(config.get("path_to_grunt"), "grunt")

        return [
            self.target_task(path, folder, target=name, command=command, args=[name])
            for name in find_grunt_tasks(content)
        ]

    def get_metadata(self) -> dict:
        """Return detector metadata."""
        return {
            "name": "grunt",
            "version": "0.1.0",
            "description": "Tasks registered with grunt.registerTask",
            "task_types": ["grunt"],
        }

    def get_supported_files(self, config: Optional[Configuration] = None) -> list[str]:
        """Return supported file patterns."""
        return [GRUNT_GLOB]
