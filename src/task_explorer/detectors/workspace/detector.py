"""Detector for tasks declared in VS Code .vscode/tasks.json files."""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

from ...core import scanner
from ...core.config import Configuration
from ...core.detector import BaseDetector
from ...core.errors import ParseError
from ...core.models import Invocation, TaskDescriptor, WorkspaceFolder, WorkspacePayload

logger = logging.getLogger(__name__)

TASKS_GLOB = "**/.vscode/tasks.json"

_FOLDER_VARIABLES = ("${workspaceFolder}", "${workspaceRoot}")


def strip_json_comments(content: str) -> str:
    """
    Remove // and /* */ comments from JSON content (JSONC format).

    VS Code allows comments in tasks.json, but standard JSON parser doesn't.
    This implementation respects string boundaries to avoid treating URLs
    like https:// as comment markers.

    Args:
        content: JSONC content

    Returns:
        JSON content with comments removed
    """
    result = []
    i = 0
    in_string = False
    escape_next = False

    while i < len(content):
        char = content[i]

        if in_string:
            result.append(char)
            if escape_next:
                escape_next = False
            elif char == "\\":
                escape_next = True
            elif char == '"':
                in_string = False
            i += 1
            continue

        if char == '"':
            in_string = True
            result.append(char)
            i += 1
            continue

        # Skip until end of line
        if content.startswith("//", i):
            while i < len(content) and content[i] != "\n":
                i += 1
            continue

        # Skip until */
        if content.startswith("/*", i):
            end = content.find("*/", i + 2)
            i = len(content) if end == -1 else end + 2
            continue

        result.append(char)
        i += 1

    return "".join(result)


def _platform_key() -> str:
    if scanner.is_windows():
        return "windows"
    if sys.platform == "darwin":
        return "osx"
    return "linux"


def _arg_value(arg) -> Optional[str]:
    """Task args are plain strings or ``{"value": ..., "quoting": ...}``."""
    if isinstance(arg, str):
        return arg
    if isinstance(arg, dict) and isinstance(arg.get("value"), str):
        return arg["value"]
    return None


class WorkspaceTasksDetector(BaseDetector):
    """Lists the labelled tasks of .vscode/tasks.json files."""

    async def read_tasks(
        self, path: Path, folder: WorkspaceFolder, config: Configuration
    ) -> list[TaskDescriptor]:
        raw_content = await scanner.read_file_async(path)

        try:
            data = json.loads(strip_json_comments(raw_content))
        except json.JSONDecodeError as e:
            raise ParseError(path, f"malformed JSON ({e})") from e

        tasks = data.get("tasks", []) if isinstance(data, dict) else []
        if not tasks or not isinstance(tasks, list):
            return []

        # The tasks file lives in <dir>/.vscode/, tasks run from <dir>
        project_dir = path.parent.parent
        descriptors = []

        for task in tasks:
            if not isinstance(task, dict):
                continue

            label = task.get("label") or task.get("taskName")
            if not label or not isinstance(label, str):
                logger.debug(f"Skipping unlabelled task in {path}")
                continue

            descriptors.append(
                TaskDescriptor(
                    type="workspace",
                    name=label,
                    detector=self.name,
                    folder_name=folder.name,
                    source_file=path,
                    relative_path=scanner.relative_dir(path.parent, folder.path),
                    invocation=self._invocation(task, project_dir),
                    is_default=_is_default_build(task),
                    payload=WorkspacePayload(label=label, file_name=path.name),
                )
            )

        return descriptors

    def _invocation(self, task: dict, project_dir: Path) -> Invocation:
        """Resolve command, args and cwd, applying platform overrides."""
        settings = dict(task)
        platform = task.get(_platform_key())
        if isinstance(platform, dict):
            settings.update(platform)

        command = settings.get("command", "")
        if not isinstance(command, str):
            command = ""
        if not command and settings.get("type") == "npm" and isinstance(settings.get("script"), str):
            command, args = "npm", ["run", settings["script"]]
        else:
            raw_args = settings.get("args", [])
            args = [
                value
                for value in (_arg_value(a) for a in (raw_args if isinstance(raw_args, list) else []))
                if value is not None
            ]

        cwd = project_dir
        options = settings.get("options")
        if isinstance(options, dict) and isinstance(options.get("cwd"), str):
            raw_cwd = options["cwd"]
            for variable in _FOLDER_VARIABLES:
                raw_cwd = raw_cwd.replace(variable, str(project_dir))
            cwd = Path(raw_cwd) if Path(raw_cwd).is_absolute() else project_dir / raw_cwd

        return Invocation(command=command, args=args, cwd=cwd)

    def get_metadata(self) -> dict:
        """Return detector metadata."""
        return {
            "name": "workspace",
            "version": "0.1.0",
            "description": "Labelled tasks in .vscode/tasks.json",
            "task_types": ["workspace"],
        }

    def get_supported_files(self, config: Optional[Configuration] = None) -> list[str]:
        """Return supported file patterns."""
        return [TASKS_GLOB]


def _is_default_build(task: dict) -> bool:
    group = task.get("group")
    return isinstance(group, dict) and group.get("isDefault") is True
