"""Detector for Makefile targets."""

import logging
import re
from pathlib import Path
from typing import Optional

from ...core import scanner
from ...core.config import Configuration
from ...core.detector import BaseDetector
from ...core.models import TaskDescriptor, WorkspaceFolder

logger = logging.getLogger(__name__)

MAKE_GLOB = "**/[Mm]akefile"

# "target [target...]: prerequisites", but not "VAR := value" or "a::=b"
_RULE_PATTERN = re.compile(r"^([^:#=\t][^:#=]*?)\s*::?(?![:=])(.*)$")


def find_make_targets(content: str) -> list[str]:
    """
    Extract explicit target names from Makefile content.

    Indented lines (recipes, continuations), comments, variable
    assignments, special targets such as ``.PHONY``, pattern rules and
    targets built from variables are skipped.

    Args:
        content: Raw file content

    Returns:
        Unique target names in order of appearance
    """
    targets = []

    for _, line in scanner.iter_lines(content):
        if not line or line[0].isspace() or line.startswith("#"):
            continue

        match = _RULE_PATTERN.match(line)
        if not match:
            continue

        for name in match.group(1).split():
            if name.startswith(".") or "%" in name or "$" in name:
                continue
            if name not in targets:
                logger.debug(f"Found make target {name}")
                targets.append(name)

    return targets


class MakeDetector(BaseDetector):
    """Finds explicit targets in Makefiles."""

    async def read_tasks(
        self, path: Path, folder: WorkspaceFolder, config: Configuration
    ) -> list[TaskDescriptor]:
        content = await scanner.read_file_async(path)
        default = "nmake" if scanner.is_windows() else "make"
        command = scanner.resolve_executable(config.path_to_make, default)

        return [
            self.target_task(path, folder, target=name, command=command, args=[name])
            for name in find_make_targets(content)
        ]

    def get_metadata(self) -> dict:
        """Return detector metadata."""
        return {
            "name": "make",
            "version": "0.1.0",
            "description": "Explicit targets in Makefiles",
            "task_types": ["make"],
        }

    def get_supported_files(self, config: Optional[Configuration] = None) -> list[str]:
        """Return supported file patterns."""
        return [MAKE_GLOB]
