"""Detector for runnable script files.

Every matching file is one task that runs the whole file through its
interpreter; there are no sub-targets.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from ...core import scanner
from ...core.config import Configuration
from ...core.detector import BaseDetector
from ...core.models import Invocation, ScriptPayload, TaskDescriptor, WorkspaceFolder

logger = logging.getLogger(__name__)

# Positional parameters in batch files (%1 .. %9)
_BATCH_ARG_PATTERN = re.compile(r"%[1-9]")


@dataclass(frozen=True)
class ScriptType:
    """Interpreter settings for one script extension."""

    executable: str
    type: str
    glob: str
    args: list[str] = field(default_factory=list)


SCRIPT_TABLE = {
    "sh": ScriptType(executable="bash", type="bash", glob="**/*.[Ss][Hh]"),
    "py": ScriptType(executable="python", type="python", glob="**/*.[Pp][Yy]"),
    "rb": ScriptType(executable="ruby", type="ruby", glob="**/*.[Rr][Bb]"),
    "ps1": ScriptType(executable="powershell", type="powershell", glob="**/*.[Pp][Ss]1"),
    "pl": ScriptType(executable="perl", type="perl", glob="**/*.[Pp][Ll]"),
    "bat": ScriptType(
        executable="cmd.exe", type="batch", glob="**/*.[Bb][Aa][Tt]", args=["/c"]
    ),
    "cmd": ScriptType(
        executable="cmd.exe", type="batch", glob="**/*.[Cc][Mm][Dd]", args=["/c"]
    ),
    "nsi": ScriptType(executable="makensis.exe", type="nsis", glob="**/*.[Nn][Ss][Ii]"),
}


class ScriptDetector(BaseDetector):
    """Turns each script file into a single runnable task."""

    async def read_tasks(
        self, path: Path, folder: WorkspaceFolder, config: Configuration
    ) -> list[TaskDescriptor]:
        script = SCRIPT_TABLE.get(path.suffix.lower().lstrip("."))
        if script is None or not config.is_enabled(script.type):
            return []

        if not path.is_file():
            raise FileNotFoundError(path)

        requires_args = False
        if script.type == "batch":
            content = scanner.read_file(path)
            requires_args = scanner.contains_pattern(content, _BATCH_ARG_PATTERN)

        executable = scanner.resolve_executable(
            config.executable_override(script.type), script.executable
        )
        sep = "\\" if scanner.is_windows() else "/"
        file_arg = "." + sep + path.name

        cmd_line = " ".join(
            [scanner.quote_if_spaced(executable), *script.args, scanner.quote_if_spaced(file_arg)]
        )

        return [
            TaskDescriptor(
                type=script.type,
                name=path.name,
                detector=self.name,
                folder_name=folder.name,
                source_file=path,
                relative_path=scanner.relative_dir(path, folder.path),
                invocation=Invocation(
                    command=executable, args=[*script.args, file_arg], cwd=path.parent
                ),
                requires_args=requires_args,
                payload=ScriptPayload(
                    script_type=script.type, file_name=path.name, cmd_line=cmd_line
                ),
            )
        ]

    def get_metadata(self) -> dict:
        """Return detector metadata."""
        return {
            "name": "script",
            "version": "0.1.0",
            "description": "Runnable script files (one task per file)",
            "task_types": sorted({s.type for s in SCRIPT_TABLE.values()}),
        }

    def get_supported_files(self, config: Optional[Configuration] = None) -> list[str]:
        """Return patterns for every script type, or only enabled ones."""
        return [
            script.glob
            for script in SCRIPT_TABLE.values()
            if config is None or config.is_enabled(script.type)
        ]
