"""Tests for output formatters."""

import asyncio
import io
import json

from rich.console import Console

from task_explorer.core.engine import TaskEngine
from task_explorer.core.models import NoTasksNode
from task_explorer.core.reporting import JsonReporter, TextReporter, count_tasks


def render_text(tree) -> str:
    output = io.StringIO()
    TextReporter(console=Console(file=output, width=200, color_system=None)).report(tree)
    return output.getvalue()


class TestTextReporter:
    """Tests for text output formatter."""

    def test_text_report_no_tasks(self):
        """Test the placeholder is printed for an empty tree."""
        text = render_text([NoTasksNode()])

        assert "No tasks found" in text

    def test_text_report_with_tasks(self, ant_project, workspace):
        """Test groups, files and tasks are rendered."""
        tree = asyncio.run(TaskEngine(workspace).refresh())

        text = render_text(tree)

        assert workspace.folders[0].name in text
        assert "ant (sub1)" in text
        assert "compile - Default" in text
        assert "Summary: 9 task(s) in 1 folder(s)" in text

    def test_markup_in_names_escaped(self, write_file, workspace):
        write_file("Makefile", "[bold]x:\n")

        text = render_text(asyncio.run(TaskEngine(workspace).refresh()))

        assert "[bold]x" in text


class TestJsonReporter:
    """Tests for JSON output formatter."""

    def test_json_report_valid(self, ant_project, workspace):
        """Test JSON output is valid and complete."""
        tree = asyncio.run(TaskEngine(workspace).refresh())

        data = json.loads(JsonReporter().report(tree))

        assert data["total_tasks"] == 9
        group = data["folders"][0]["files"][0]
        assert group["is_group"]
        assert len(group["children"]) == 3
        task = group["children"][0]["tasks"][0]
        assert task["task"]["payload"]["kind"] == "target"
        assert task["task"]["invocation"]["command"] == "ant"

    def test_json_report_empty(self):
        data = json.loads(JsonReporter().report([NoTasksNode()]))

        assert data == {"folders": [], "total_tasks": 0}

    def test_count_tasks(self):
        assert count_tasks([NoTasksNode()]) == 0

    def test_execution_state_reported(self, write_file, workspace):
        """Test running and paused flags reach both formats."""
        write_file("Makefile", "build:\nlint:\n")
        engine = TaskEngine(workspace, detectors=["make"])

        async def scenario():
            tasks = await engine.collect_tasks()
            ids = {t.name: t.task_id for t in tasks}
            return await engine.refresh(running={ids["build"], ids["lint"]}, paused={ids["lint"]})

        tree = asyncio.run(scenario())

        tasks = json.loads(JsonReporter().report(tree))["folders"][0]["files"][0]["tasks"]
        assert [(t["label"], t["running"], t["paused"]) for t in tasks] == [
            ("build", True, False),
            ("lint", True, True),
        ]
        text = render_text(tree)
        assert "build (running)" in text
        assert "lint (running) (paused)" in text
