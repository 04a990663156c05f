"""Core data models for Task Explorer."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, field_serializer, field_validator


@dataclass
class Match:
    """
    Pattern match result from a text scan.

    Attributes:
        pattern_name: Name of the pattern that matched
        matched_text: The actual text that matched
        start_position: Character offset where match starts
        end_position: Character offset where match ends
        line_number: Line number of the match (optional)
        groups: Captured groups of the match, if any
    """

    pattern_name: str
    matched_text: str
    start_position: int
    end_position: int
    line_number: Optional[int] = None
    groups: tuple[str, ...] = ()


class WorkspaceFolder(BaseModel):
    """A root folder of the workspace being explored."""

    name: str = Field(..., description="Display name of the folder")
    path: Path = Field(..., description="Absolute path of the folder")
    index: int = Field(0, description="Position of the folder in the workspace")

    @field_serializer("path")
    def serialize_path(self, path: Path) -> str:
        """Serialize Path to string for JSON output."""
        return str(path)

    @field_validator("path", mode="before")
    @classmethod
    def validate_path(cls, v):
        """Convert string to an absolute Path."""
        return Path(v).resolve()


class Workspace(BaseModel):
    """Ordered collection of workspace folders."""

    folders: list[WorkspaceFolder] = Field(default_factory=list)

    @classmethod
    def from_paths(cls, paths: list[Path]) -> "Workspace":
        """
        Build a workspace from folder paths, named after their directory.

        Duplicate names get a numeric suffix so folder names stay unique.
        """
        folders = []
        seen: dict[str, int] = {}
        for index, path in enumerate(paths):
            resolved = Path(path).resolve()
            name = resolved.name or str(resolved)
            if name in seen:
                seen[name] += 1
                name = f"{name} ({seen[name]})"
            else:
                seen[name] = 1
            folders.append(WorkspaceFolder(name=name, path=resolved, index=index))
        return cls(folders=folders)

    def get(self, name: str) -> Optional[WorkspaceFolder]:
        """Return the folder with the given name, if any."""
        for folder in self.folders:
            if folder.name == name:
                return folder
        return None

    def folder_for(self, path: Path) -> Optional[WorkspaceFolder]:
        """Return the deepest workspace folder containing ``path``."""
        resolved = Path(path).resolve()
        owner = None
        for folder in self.folders:
            if resolved == folder.path or resolved.is_relative_to(folder.path):
                if owner is None or len(folder.path.parts) > len(owner.path.parts):
                    owner = folder
        return owner


class Invocation(BaseModel):
    """Process invocation triple handed to the external runner."""

    command: str = Field(..., description="Executable to run")
    args: list[str] = Field(default_factory=list, description="Ordered arguments")
    cwd: Path = Field(..., description="Working directory")

    @field_serializer("cwd")
    def serialize_cwd(self, path: Path) -> str:
        """Serialize Path to string for JSON output."""
        return str(path)


class TargetPayload(BaseModel):
    """A named target inside a build file (ant, gradle, make, npm, ...)."""

    kind: Literal["target"] = "target"
    target: str = Field(..., description="Target name as passed to the tool")
    file_name: str = Field(..., description="Base name of the build file")


class ScriptPayload(BaseModel):
    """A whole script file run through its interpreter."""

    kind: Literal["script"] = "script"
    script_type: str = Field(..., description="Script type (bash, batch, python, ...)")
    file_name: str = Field(..., description="Base name of the script")
    cmd_line: str = Field(..., description="Shell command line, quoted as needed")


class TscPayload(BaseModel):
    """A TypeScript compiler task derived from a tsconfig file."""

    kind: Literal["tsc"] = "tsc"
    config_file: str = Field(..., description="Config path relative to the folder")


class WorkspacePayload(BaseModel):
    """A task declared in .vscode/tasks.json."""

    kind: Literal["workspace"] = "workspace"
    label: str = Field(..., description="Task label")
    file_name: str = Field("tasks.json", description="Base name of the tasks file")


TaskPayload = Annotated[
    Union[TargetPayload, ScriptPayload, TscPayload, WorkspacePayload],
    Field(discriminator="kind"),
]


class TaskDescriptor(BaseModel):
    """
    Normalized record of one invocable task.

    The envelope is shared by every detector; format specific details live
    in ``payload``, discriminated by ``payload.kind``. Identity is
    ``(type, source_file, name)``.
    """

    type: str = Field(..., description="Task source shown in the tree")
    name: str = Field(..., min_length=1, description="Display name")
    detector: str = Field(..., description="Detector (cache) that owns this task")
    folder_name: str = Field(..., description="Owning workspace folder")
    source_file: Path = Field(..., description="File the task was found in")
    relative_path: str = Field(
        "", description="Directory of source_file relative to the folder"
    )
    invocation: Invocation
    requires_args: bool = Field(
        False, description="Runner must prompt for extra arguments"
    )
    is_default: bool = Field(False, description="Default target of its file")
    payload: TaskPayload

    @field_serializer("source_file")
    def serialize_path(self, path: Path) -> str:
        """Serialize Path to string for JSON output."""
        return str(path)

    @field_validator("source_file", mode="before")
    @classmethod
    def validate_path(cls, v):
        """Convert string to Path if needed."""
        if isinstance(v, str):
            return Path(v)
        return v

    @property
    def identity(self) -> tuple[str, str, str]:
        return (self.type, str(self.source_file), self.name)

    @property
    def task_id(self) -> str:
        """Stable string id, used to match live executions."""
        return f"{self.type}:{self.source_file}:{self.name}"

    @property
    def file_name(self) -> Optional[str]:
        return getattr(self.payload, "file_name", None)

    @property
    def file_grouped(self) -> bool:
        """Script tasks are grouped per directory rather than per file."""
        return self.payload.kind == "script"


@dataclass
class TreeTask:
    """Leaf node wrapping one TaskDescriptor."""

    descriptor: TaskDescriptor
    label: str
    running: bool = False
    paused: bool = False

    @property
    def id(self) -> str:
        return self.descriptor.task_id


@dataclass(eq=False)
class TreeFile:
    """
    A task file node, or a synthetic group of same-type task files.

    Concrete files own ``tasks``; groups own ``children``.
    """

    id: str
    folder_name: str
    type: str
    relative_path: str
    label: str
    file_name: Optional[str] = None
    resource_path: Optional[Path] = None
    is_group: bool = False
    tasks: list[TreeTask] = field(default_factory=list)
    children: list["TreeFile"] = field(default_factory=list)

    def add_task(self, task: TreeTask) -> None:
        self.tasks.append(task)

    def add_child(self, child: "TreeFile") -> None:
        if child not in self.children:
            self.children.append(child)

    @property
    def tooltip(self) -> str:
        if self.is_group:
            return f"{self.type.capitalize()} Task Files"
        return str(self.resource_path) if self.resource_path else self.label


@dataclass
class TreeFolder:
    """Top level node, one per workspace folder with tasks."""

    name: str
    path: Path
    index: int = 0
    files: list[TreeFile] = field(default_factory=list)

    def add_file(self, tree_file: TreeFile) -> None:
        self.files.append(tree_file)

    def remove_file(self, tree_file: TreeFile) -> None:
        self.files.remove(tree_file)


@dataclass
class NoTasksNode:
    """Placeholder shown when no tasks were found anywhere."""

    label: str = "No tasks found"
