"""Build the folder -> file/group -> task tree from flat descriptors."""

import logging
import posixpath
from typing import Iterable, Optional, Union

from .config import Configuration
from .models import (
    NoTasksNode,
    TaskDescriptor,
    TreeFile,
    TreeFolder,
    TreeTask,
    Workspace,
    WorkspaceFolder,
)
from .scanner import is_excluded

logger = logging.getLogger(__name__)

INSTALL_TASK_NAME = "install"
NAME_PATH_SEPARATOR = " - "
ROOT_TSCONFIG_SUFFIX = " - tsconfig.json"

# Build files whose name is implied by the type in a label
CONVENTIONAL_FILE_NAMES = {
    "ant": {"build.xml", "Build.xml"},
    "gradle": {"build.gradle", "Build.gradle"},
}

TreeResult = Union[list[TreeFolder], list[NoTasksNode]]


def file_label(task_type: str, relative_path: str, file_name: Optional[str], group: bool) -> str:
    """
    Compute the display label of a task file node.

    Groups and files at the folder root show just the type. Other files show
    their directory, and ant/gradle files with an unconventional name show
    the file name too, e.g. ``ant (sub/alt.xml)``.

    Args:
        task_type: Task type of the file
        relative_path: Folder-relative directory of the file
        file_name: Base name of the file, if known
        group: Whether the node is a synthetic group

    Returns:
        Lower-cased label
    """
    label = "vscode" if task_type == "workspace" else task_type
    relative_path = relative_path.rstrip("/\\")
    if group:
        return label.lower()

    shown_path = relative_path if relative_path != ".vscode" else ""
    if file_name and file_name not in CONVENTIONAL_FILE_NAMES.get(task_type, {file_name}):
        shown_path = f"{shown_path}/{file_name}" if shown_path else file_name

    if shown_path:
        return f"{label} ({shown_path})".lower()
    return label.lower()


def task_label(name: str) -> str:
    """Strip an embedded ``" - <path>"`` suffix from a task name."""
    index = name.find(NAME_PATH_SEPARATOR)
    if index == -1:
        return name
    if "/" in name or "\\" in name or ROOT_TSCONFIG_SUFFIX in name:
        return name[:index]
    return name


def tree_relative_path(
    descriptor: TaskDescriptor, folder: WorkspaceFolder, config: Configuration
) -> Optional[str]:
    """
    Return the directory a descriptor is filed under, or None to drop it.

    tsc descriptors carry no directory; it is taken from the config path
    embedded in their name (``build - sub/tsconfig.json`` -> ``sub``).
    """
    relative_path = descriptor.relative_path
    name = descriptor.name

    if descriptor.type == "tsc" and NAME_PATH_SEPARATOR in name and ROOT_TSCONFIG_SUFFIX not in name:
        embedded = name[name.index(NAME_PATH_SEPARATOR) + len(NAME_PATH_SEPARATOR):]
        relative_path = posixpath.dirname(embedded.replace("\\", "/"))
        if relative_path and is_excluded(f"{(folder.path / relative_path).as_posix()}/", config.exclude):
            logger.debug(f"Skipping tsc task {name}: {relative_path} is excluded")
            return None

    return relative_path


def build_tree(
    descriptors: Iterable[TaskDescriptor],
    workspace: Workspace,
    config: Configuration,
    running: Iterable[str] = (),
    install_types: Iterable[str] = ("npm",),
    paused: Iterable[str] = (),
) -> TreeResult:
    """
    Group descriptors into the presentation tree.

    Args:
        descriptors: Merged descriptors from every detector and provider
        workspace: Workspace whose folders are recognised
        config: Active configuration (enable flags, excludes)
        running: Ids of tasks currently executing
        install_types: Types whose ``install`` task is run by the install helper
        paused: Ids of running tasks stopped at a breakpoint

    Returns:
        Folders in workspace order, or ``[NoTasksNode()]`` if nothing survived
    """
    running_ids = set(running)
    paused_ids = set(paused)
    install_types = set(install_types)
    folders: dict[str, TreeFolder] = {}
    files: dict[str, TreeFile] = {}

    for descriptor in descriptors:
        folder = workspace.get(descriptor.folder_name)
        if not config.is_enabled(descriptor.type) or folder is None:
            logger.debug(f"Skipping {descriptor.task_id}")
            continue
        if descriptor.type in install_types and descriptor.name == INSTALL_TASK_NAME:
            continue

        relative_path = tree_relative_path(descriptor, folder, config)
        if relative_path is None:
            continue

        tree_folder = folders.get(folder.name)
        if tree_folder is None:
            tree_folder = TreeFolder(name=folder.name, path=folder.path, index=folder.index)
            folders[folder.name] = tree_folder

        file_id = file_node_id(descriptor, relative_path)
        tree_file = files.get(file_id)
        if tree_file is None:
            tree_file = _new_file(file_id, descriptor, folder, relative_path)
            tree_folder.add_file(tree_file)
            files[file_id] = tree_file

        tree_file.add_task(
            TreeTask(
                descriptor=descriptor,
                label=task_label(descriptor.name),
                running=descriptor.task_id in running_ids,
                paused=descriptor.task_id in paused_ids,
            )
        )

    result = []
    for tree_folder in sorted(folders.values(), key=lambda f: f.index):
        for tree_file in tree_folder.files:
            tree_file.tasks.sort(key=lambda t: t.label.lower())
        tree_folder.files.sort(key=_file_sort_key)
        promote_subfolders(tree_folder)
        if tree_folder.files:
            result.append(tree_folder)

    if not result:
        return [NoTasksNode()]
    return result


def file_node_id(descriptor: TaskDescriptor, relative_path: str) -> str:
    """Composite id ``type:folder/relative-dir[/file]`` of a file node."""
    node_id = f"{descriptor.type}:" + posixpath.join(descriptor.folder_name, relative_path)
    if descriptor.file_name and not descriptor.file_grouped:
        node_id = posixpath.join(node_id, descriptor.file_name)
    return node_id


def promote_subfolders(tree_folder: TreeFolder) -> None:
    """
    Move same-type sibling files under one group node per type.

    Walks the type-sorted files; two consecutive files of the same type
    create (or reuse) the group for that type, and a later file whose type
    already has a group joins it. Grouped files are removed from the folder
    and the folder's children are re-sorted.
    """
    groups: dict[str, TreeFile] = {}
    previous: Optional[TreeFile] = None

    for tree_file in list(tree_folder.files):
        group = groups.get(tree_file.type)
        if group is None and previous is not None and previous.type == tree_file.type:
            group = TreeFile(
                id=f"{tree_file.type}:{tree_folder.name}",
                folder_name=tree_folder.name,
                type=tree_file.type,
                relative_path=tree_file.relative_path,
                label=file_label(tree_file.type, tree_file.relative_path, None, group=True),
                is_group=True,
            )
            groups[tree_file.type] = group
            tree_folder.add_file(group)
            group.add_child(previous)
        if group is not None:
            group.add_child(tree_file)
        previous = tree_file

    for group in groups.values():
        for child in group.children:
            tree_folder.remove_file(child)
        logger.debug(f"Grouped {len(group.children)} {group.type} file(s) in {tree_folder.name}")

    tree_folder.files.sort(key=_file_sort_key)


def _file_sort_key(tree_file: TreeFile) -> tuple[str, str]:
    return (tree_file.type.lower(), tree_file.label.lower())


def _new_file(
    file_id: str, descriptor: TaskDescriptor, folder: WorkspaceFolder, relative_path: str
) -> TreeFile:
    file_name = None if descriptor.file_grouped else descriptor.file_name
    if descriptor.type == "tsc":
        file_name = "tsconfig.json"

    if descriptor.payload.kind == "workspace":
        resource_path = descriptor.source_file
    elif file_name:
        resource_path = folder.path / relative_path / file_name
    else:
        resource_path = folder.path / relative_path

    return TreeFile(
        id=file_id,
        folder_name=folder.name,
        type=descriptor.type,
        relative_path=relative_path,
        label=file_label(descriptor.type, relative_path, descriptor.file_name, group=False),
        file_name=file_name,
        resource_path=resource_path,
    )
