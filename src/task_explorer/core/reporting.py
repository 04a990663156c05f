"""Output formatters for the task tree."""

import json

from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from .. import __version__
from .models import NoTasksNode, TreeFile, TreeFolder, TreeTask
from .tree import TreeResult


def count_tasks(tree: TreeResult) -> int:
    """Number of task leaves in a tree."""
    return sum(
        _count_file_tasks(tree_file)
        for node in tree
        if isinstance(node, TreeFolder)
        for tree_file in node.files
    )


def _count_file_tasks(tree_file: TreeFile) -> int:
    return len(tree_file.tasks) + sum(_count_file_tasks(c) for c in tree_file.children)


class TextReporter:
    """Human-readable output using rich library."""

    def __init__(self, console: Console | None = None):
        """Initialize text reporter with optional console."""
        self.console = console or Console()

    def report(self, tree: TreeResult) -> None:
        """
        Print the task tree.

        Args:
            tree: Result of a refresh
        """
        self.console.print(f"Task Explorer v{__version__}", style="bold")

        if not tree or isinstance(tree[0], NoTasksNode):
            label = tree[0].label if tree else NoTasksNode().label
            self.console.print(label, style="yellow bold")
            return

        for folder in tree:
            root = Tree(f"[bold]{escape(folder.name)}[/bold] [dim]{escape(str(folder.path))}[/dim]")
            for tree_file in folder.files:
                self._add_file(root, tree_file)
            self.console.print(root)

        self.console.print(f"Summary: {count_tasks(tree)} task(s) in {len(tree)} folder(s)")

    def _add_file(self, parent: Tree, tree_file: TreeFile) -> None:
        style = "magenta" if tree_file.is_group else "cyan"
        branch = parent.add(f"[{style}]{escape(tree_file.label)}[/{style}]")
        for child in tree_file.children:
            self._add_file(branch, child)
        for task in tree_file.tasks:
            branch.add(self._task_label(task))

    def _task_label(self, task: TreeTask) -> str:
        label = escape(task.label)
        if task.descriptor.is_default:
            label = f"[bold]{label}[/bold]"
        if task.running:
            label += " [green](running)[/green]"
        if task.paused:
            label += " [yellow](paused)[/yellow]"
        return label


class JsonReporter:
    """JSON output for programmatic consumption."""

    def report(self, tree: TreeResult) -> str:
        """
        Generate JSON report.

        Args:
            tree: Result of a refresh

        Returns:
            JSON string
        """
        folders = [self._folder(node) for node in tree if isinstance(node, TreeFolder)]
        return json.dumps(
            {"folders": folders, "total_tasks": count_tasks(tree)},
            indent=2,
        )

    def _folder(self, folder: TreeFolder) -> dict:
        return {
            "name": folder.name,
            "path": str(folder.path),
            "files": [self._file(f) for f in folder.files],
        }

    def _file(self, tree_file: TreeFile) -> dict:
        return {
            "id": tree_file.id,
            "label": tree_file.label,
            "type": tree_file.type,
            "is_group": tree_file.is_group,
            "path": str(tree_file.resource_path) if tree_file.resource_path else None,
            "children": [self._file(c) for c in tree_file.children],
            "tasks": [
                {
                    "label": task.label,
                    "running": task.running,
                    "paused": task.paused,
                    "task": task.descriptor.model_dump(mode="json"),
                }
                for task in tree_file.tasks
            ],
        }
