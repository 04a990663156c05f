"""Detector for app-publisher release configurations (.publishrc*)."""

import logging
from pathlib import Path
from typing import Optional

from ...core import scanner
from ...core.config import Configuration
from ...core.detector import BaseDetector
from ...core.models import TaskDescriptor, WorkspaceFolder

logger = logging.getLogger(__name__)

PUBLISHRC_GLOB = "**/.publishrc*"

# Task name -> app-publisher arguments
PUBLISH_TASKS = {
    "Dry Run": ["--dry-run"],
    "Publish": [],
    "Re-publish": ["--republish"],
}


class AppPublisherDetector(BaseDetector):
    """Offers the standard release tasks for each app-publisher config."""

    async def read_tasks(
        self, path: Path, folder: WorkspaceFolder, config: Configuration
    ) -> list[TaskDescriptor]:
        # Content is not inspected, the file only has to exist
        if not path.is_file():
            raise FileNotFoundError(path)

        command = scanner.resolve_executable(config.path_to_app_publisher, "app-publisher")
        logger.debug(f"Found app-publisher config {path}")

        return [
            self.target_task(
                path,
                folder,
                target=name,
                command=command,
                args=list(args),
                task_type="app-publisher",
            )
            for name, args in PUBLISH_TASKS.items()
        ]

    def get_metadata(self) -> dict:
        """Return detector metadata."""
        return {
            "name": "app-publisher",
            "version": "0.1.0",
            "description": "Release tasks for app-publisher .publishrc files",
            "task_types": ["app-publisher"],
        }

    def get_supported_files(self, config: Optional[Configuration] = None) -> list[str]:
        """Return supported file patterns."""
        return [PUBLISHRC_GLOB]
