"""Detector for Ant build files (build.xml targets)."""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Optional

from ...core import scanner
from ...core.config import Configuration
from ...core.detector import BaseDetector
from ...core.errors import ParseError
from ...core.models import TaskDescriptor, WorkspaceFolder

logger = logging.getLogger(__name__)

ANT_GLOB = "**/[Bb]uild.xml"
DEFAULT_SUFFIX = " - Default"
ANSI_COLOR_LOGGER = "org.apache.tools.ant.listener.AnsiColorLogger"


def parse_ant_targets(content: str, path: Optional[Path] = None) -> list[tuple[str, bool]]:
    """
    Extract target names from Ant build file content.

    Args:
        content: Raw XML content
        path: File path, for error messages

    Returns:
        List of ``(target_name, is_default)`` in document order

    Raises:
        ParseError: If the XML is malformed, the root is not ``<project>``,
            or the project has no targets
    """
    try:
        root = ET.fromstring(content)
    except ET.ParseError as e:
        raise ParseError(path, f"malformed XML ({e})") from e

    if _local_name(root.tag) != "project":
        raise ParseError(path, "file does not contain a <project> root")

    target_elements = [child for child in root if _local_name(child.tag) == "target"]
    if not target_elements:
        raise ParseError(path, "project does not contain any targets")

    default_target = root.get("default")
    targets = []
    seen = set()

    for element in target_elements:
        name = (element.get("name") or "").strip()
        if not name:
            logger.debug(f"Invalid target without a name in {path}")
            continue
        if name in seen:
            continue
        seen.add(name)
        logger.debug(f"Found ant target {name}")
        targets.append((name, name == default_target))

    return targets


def _local_name(tag) -> str:
    """Strip any ``{namespace}`` prefix from an element tag."""
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]


class AntDetector(BaseDetector):
    """Finds targets in Ant build files."""

    async def read_tasks(
        self, path: Path, folder: WorkspaceFolder, config: Configuration
    ) -> list[TaskDescriptor]:
        content = await scanner.read_file_async(path)
        tasks = []

        for target, is_default in parse_ant_targets(content, path):
            command, args = self.build_command(path, target, config)
            tasks.append(
                self.target_task(
                    path,
                    folder,
                    target=target,
                    command=command,
                    args=args,
                    name=target + DEFAULT_SUFFIX if is_default else target,
                    is_default=is_default,
                )
            )

        return tasks

    def build_command(
        self, path: Path, target: str, config: Configuration
    ) -> tuple[str, list[str]]:
        """
        Build the ``(command, args)`` pair for one target.

        Args:
            path: Build file path
            target: Target name
            config: Active configuration

        Returns:
            Executable and ordered argument list
        """
        ant = self._ant_executable(config)
        args = [target]

        # ant only picks up build.xml on its own
        if path.name != "build.xml":
            args = ["-f", path.name, target]

        if scanner.is_windows() and config.enable_ansicon_for_ant:
            return self._ansicon_executable(config), [ant, "-logger", ANSI_COLOR_LOGGER, *args]

        return ant, args

    def _ant_executable(self, config: Configuration) -> str:
        default = "ant.bat" if scanner.is_windows() else "ant"
        ant = scanner.resolve_executable(config.path_to_ant, default)
        if scanner.is_windows() and ant != default and ant.endswith("\\ant"):
            ant += ".bat"
        return ant

    def _ansicon_executable(self, config: Configuration) -> str:
        ansicon = "ansicon.exe"
        configured = scanner.resolve_executable(config.path_to_ansicon, "")
        if configured and Path(configured).exists():
            ansicon = configured
            if ansicon.endswith("\\"):
                ansicon += "ansicon.exe"
            elif not ansicon.endswith("ansicon.exe"):
                ansicon = str(Path(ansicon) / "ansicon.exe")
        return ansicon

    def get_metadata(self) -> dict:
        """Return detector metadata."""
        return {
            "name": "ant",
            "version": "0.1.0",
            "description": "Targets declared in Ant build.xml files",
            "task_types": ["ant"],
        }

    def get_supported_files(self, config: Optional[Configuration] = None) -> list[str]:
        """Return supported file patterns, including configured extra globs."""
        globs = [ANT_GLOB]
        if config is not None:
            globs.extend(g for g in config.include_ant if g and g not in globs)
        return globs
