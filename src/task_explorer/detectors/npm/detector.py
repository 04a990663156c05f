"""Detector for npm scripts declared in package.json."""

import json
import logging
from pathlib import Path
from typing import Optional

from ...core import scanner
from ...core.config import Configuration
from ...core.detector import BaseDetector
from ...core.errors import ParseError
from ...core.models import Invocation, TargetPayload, TaskDescriptor, WorkspaceFolder

logger = logging.getLogger(__name__)

PACKAGE_GLOB = "**/package.json"
INSTALL_TASK = "install"


def build_install_task(package_json: Path, folder: WorkspaceFolder) -> TaskDescriptor:
    """
    Build the ``npm install`` task for a package.json.

    The install task is not listed among a package's scripts in the tree;
    the runner requests it explicitly for a package file node.

    Args:
        package_json: Path to package.json
        folder: Workspace folder owning the file

    Returns:
        Descriptor running ``npm install`` in the package directory
    """
    return TaskDescriptor(
        type="npm",
        name=INSTALL_TASK,
        detector="npm",
        folder_name=folder.name,
        source_file=package_json,
        relative_path=scanner.relative_dir(package_json, folder.path),
        invocation=Invocation(command="npm", args=["install"], cwd=package_json.parent),
        payload=TargetPayload(target=INSTALL_TASK, file_name=package_json.name),
    )


class NpmDetector(BaseDetector):
    """Finds scripts in package.json files, outside node_modules."""

    def accepts(self, path: Path, folder: WorkspaceFolder, config: Configuration) -> bool:
        if "node_modules" in Path(path).parts:
            return False
        return super().accepts(path, folder, config)

    def install_task(self, package_json: Path, folder: WorkspaceFolder) -> TaskDescriptor:
        """Return the install helper task for a package.json."""
        return build_install_task(package_json, folder)

    async def read_tasks(
        self, path: Path, folder: WorkspaceFolder, config: Configuration
    ) -> list[TaskDescriptor]:
        content = await scanner.read_file_async(path)

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ParseError(path, f"malformed JSON ({e})") from e

        if not isinstance(data, dict):
            raise ParseError(path, "package.json is not an object")

        # Extract scripts section
        scripts = data.get("scripts", {})
        if not scripts or not isinstance(scripts, dict):
            return []

        return [
            self.target_task(path, folder, target=name, command="npm", args=["run", name])
            for name, body in scripts.items()
            if name and isinstance(body, str)
        ]

    def get_metadata(self) -> dict:
        """Return detector metadata."""
        return {
            "name": "npm",
            "version": "0.1.0",
            "description": "Scripts declared in package.json",
            "task_types": ["npm"],
            "install_helper": True,
        }

    def get_supported_files(self, config: Optional[Configuration] = None) -> list[str]:
        """Return supported file patterns."""
        return [PACKAGE_GLOB]
