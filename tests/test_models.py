"""Tests for core data models."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from task_explorer.core.models import (
    Invocation,
    Match,
    NoTasksNode,
    ScriptPayload,
    TargetPayload,
    TaskDescriptor,
    TreeFile,
    TscPayload,
    Workspace,
)


def make_descriptor(tmp_path, name="build", payload=None, **kwargs):
    return TaskDescriptor(
        type=kwargs.pop("type", "ant"),
        name=name,
        detector=kwargs.pop("detector", "ant"),
        folder_name=tmp_path.name,
        source_file=kwargs.pop("source_file", tmp_path / "build.xml"),
        invocation=Invocation(command="ant", args=[name], cwd=tmp_path),
        payload=payload or TargetPayload(target=name, file_name="build.xml"),
        **kwargs,
    )


class TestMatch:
    """Tests for Match dataclass."""

    def test_match_creation(self):
        """Test creating a Match object."""
        match = Match(
            pattern_name="grunt_task",
            matched_text="grunt.registerTask('x'",
            start_position=10,
            end_position=32,
            line_number=5,
            groups=("x",),
        )
        assert match.pattern_name == "grunt_task"
        assert match.line_number == 5
        assert match.groups == ("x",)

    def test_match_without_line_number(self):
        """Test Match with optional fields."""
        match = Match(pattern_name="test", matched_text="text", start_position=0, end_position=4)
        assert match.line_number is None
        assert match.groups == ()


class TestWorkspace:
    """Tests for Workspace and WorkspaceFolder."""

    def test_from_paths_names_and_indexes(self, tmp_path):
        """Test folders are named after their directory, in order."""
        (tmp_path / "a").mkdir()
        (tmp_path / "b").mkdir()
        workspace = Workspace.from_paths([tmp_path / "b", tmp_path / "a"])

        assert [f.name for f in workspace.folders] == ["b", "a"]
        assert [f.index for f in workspace.folders] == [0, 1]
        assert workspace.folders[0].path.is_absolute()

    def test_duplicate_names_get_suffix(self, tmp_path):
        """Test two folders with the same base name stay distinguishable."""
        (tmp_path / "x" / "app").mkdir(parents=True)
        (tmp_path / "y" / "app").mkdir(parents=True)
        workspace = Workspace.from_paths([tmp_path / "x" / "app", tmp_path / "y" / "app"])

        assert [f.name for f in workspace.folders] == ["app", "app (2)"]

    def test_folder_for_picks_deepest(self, tmp_path):
        """Test nested workspace folders own their own files."""
        inner = tmp_path / "inner"
        inner.mkdir()
        workspace = Workspace.from_paths([tmp_path, inner])

        assert workspace.folder_for(inner / "build.xml").path == inner.resolve()
        assert workspace.folder_for(tmp_path / "build.xml").path == tmp_path.resolve()

    def test_folder_for_outside(self, tmp_path):
        """Test paths outside every folder have no owner."""
        (tmp_path / "ws").mkdir()
        workspace = Workspace.from_paths([tmp_path / "ws"])

        assert workspace.folder_for(tmp_path / "other" / "build.xml") is None

    def test_get_by_name(self, tmp_path):
        workspace = Workspace.from_paths([tmp_path])

        assert workspace.get(tmp_path.resolve().name) is workspace.folders[0]
        assert workspace.get("missing") is None


class TestTaskDescriptor:
    """Tests for TaskDescriptor model."""

    def test_descriptor_creation(self, tmp_path):
        """Test creating a TaskDescriptor."""
        task = make_descriptor(tmp_path)

        assert task.identity == ("ant", str(tmp_path / "build.xml"), "build")
        assert task.task_id == f"ant:{tmp_path / 'build.xml'}:build"
        assert task.file_name == "build.xml"
        assert task.relative_path == ""
        assert not task.requires_args
        assert not task.file_grouped

    def test_empty_name_rejected(self, tmp_path):
        """Test that names must be non-empty."""
        with pytest.raises(ValidationError):
            make_descriptor(tmp_path, name="")

    def test_path_conversion(self, tmp_path):
        """Test string source_file is converted to Path."""
        task = make_descriptor(tmp_path, source_file=str(tmp_path / "build.xml"))

        assert isinstance(task.source_file, Path)

    def test_script_payload_is_file_grouped(self, tmp_path):
        """Test script descriptors group per directory."""
        task = make_descriptor(
            tmp_path,
            name="run.sh",
            type="bash",
            detector="script",
            payload=ScriptPayload(script_type="bash", file_name="run.sh", cmd_line="bash ./run.sh"),
        )

        assert task.file_grouped
        assert task.file_name == "run.sh"

    def test_tsc_payload_has_no_file_name(self, tmp_path):
        task = make_descriptor(
            tmp_path, name="build - tsconfig.json", type="tsc", payload=TscPayload(config_file="tsconfig.json")
        )

        assert task.file_name is None

    def test_json_round_trip_keeps_payload_kind(self, tmp_path):
        """Test serialization keeps the discriminated payload."""
        task = make_descriptor(tmp_path)
        data = json.loads(task.model_dump_json())

        assert data["payload"]["kind"] == "target"
        assert data["source_file"] == str(tmp_path / "build.xml")
        assert data["invocation"]["cwd"] == str(tmp_path)
        assert TaskDescriptor.model_validate(data).payload == task.payload

    def test_unknown_payload_kind_rejected(self, tmp_path):
        """Test the payload discriminator is enforced."""
        data = json.loads(make_descriptor(tmp_path).model_dump_json())
        data["payload"]["kind"] = "other"

        with pytest.raises(ValidationError):
            TaskDescriptor.model_validate(data)


class TestTreeNodes:
    """Tests for tree node dataclasses."""

    def test_group_tooltip(self):
        group = TreeFile(
            id="ant:ws", folder_name="ws", type="ant", relative_path="", label="ant", is_group=True
        )

        assert group.tooltip == "Ant Task Files"

    def test_add_child_once(self):
        """Test a child file is only added once to a group."""
        group = TreeFile(id="g", folder_name="ws", type="ant", relative_path="", label="ant", is_group=True)
        child = TreeFile(id="c", folder_name="ws", type="ant", relative_path="", label="ant")
        group.add_child(child)
        group.add_child(child)

        assert group.children == [child]

    def test_no_tasks_label(self):
        assert NoTasksNode().label == "No tasks found"
