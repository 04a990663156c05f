"""Detector for TypeScript compiler configurations.

Tasks are named the way editor hosts name them, ``build - <config>`` and
``watch - <config>``, with the config path embedded in the name. They carry
no relative path of their own; the tree builder derives it from the name.
"""

import logging
from pathlib import Path
from typing import Optional

from ...core import scanner
from ...core.config import Configuration
from ...core.detector import BaseDetector
from ...core.models import Invocation, TaskDescriptor, TscPayload, WorkspaceFolder

logger = logging.getLogger(__name__)

TSCONFIG_GLOB = "**/tsconfig.json"
NAME_SEPARATOR = " - "


class TscDetector(BaseDetector):
    """Provides build and watch tasks for each tsconfig.json."""

    async def read_tasks(
        self, path: Path, folder: WorkspaceFolder, config: Configuration
    ) -> list[TaskDescriptor]:
        if not path.is_file():
            raise FileNotFoundError(path)

        config_file = path.relative_to(folder.path).as_posix()
        logger.debug(f"Found tsconfig {config_file}")
        command = scanner.resolve_executable(config.get("path_to_tsc"), "tsc")
        variants = [
            ("build", ["-p", config_file]),
            ("watch", ["-w", "-p", config_file]),
        ]

        return [
            TaskDescriptor(
                type="tsc",
                name=f"{mode}{NAME_SEPARATOR}{config_file}",
                detector=self.name,
                folder_name=folder.name,
                source_file=path,
                invocation=Invocation(command=command, args=args, cwd=folder.path),
                payload=TscPayload(config_file=config_file),
            )
            for mode, args in variants
        ]

    def get_metadata(self) -> dict:
        """Return detector metadata."""
        return {
            "name": "tsc",
            "version": "0.1.0",
            "description": "Build and watch tasks for tsconfig.json files",
            "task_types": ["tsc"],
        }

    def get_supported_files(self, config: Optional[Configuration] = None) -> list[str]:
        """Return supported file patterns."""
        return [TSCONFIG_GLOB]
