"""Shared pytest fixtures for Task Explorer tests."""

import json
import textwrap
from pathlib import Path

import pytest

from task_explorer.core.config import Configuration
from task_explorer.core.models import Workspace


@pytest.fixture
def write_file(tmp_path):
    """Write a file below tmp_path, creating parent directories."""

    def _write(relative: str, content: str = "") -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content))
        return path

    return _write


@pytest.fixture
def workspace(tmp_path):
    """Single-folder workspace rooted at tmp_path."""
    return Workspace.from_paths([tmp_path])


@pytest.fixture
def folder(workspace):
    """The workspace folder for tmp_path."""
    return workspace.folders[0]


@pytest.fixture
def config():
    """Default configuration."""
    return Configuration()


# Ant fixtures
ANT_BUILD = """\
<?xml version="1.0"?>
<project name="demo" default="compile">
    <target name="clean"/>
    <target name="compile" depends="clean"/>
    <target name="dist"/>
</project>
"""


@pytest.fixture
def ant_project(write_file, tmp_path):
    """Folder with three Ant build files: root, sub1 and sub2."""
    write_file("build.xml", ANT_BUILD)
    write_file("sub1/build.xml", ANT_BUILD)
    write_file("sub2/build.xml", ANT_BUILD)
    return tmp_path


@pytest.fixture
def ant_build():
    """Ant build file content with a default target."""
    return ANT_BUILD


# npm fixtures
@pytest.fixture
def npm_package(write_file, tmp_path):
    """Package with normal scripts and an install script."""
    write_file(
        "package.json",
        json.dumps({
            "name": "clean-pkg",
            "version": "1.0.0",
            "scripts": {"build": "tsc", "test": "jest", "install": "node setup.js"},
        }),
    )
    return tmp_path


@pytest.fixture
def npm_monorepo(write_file, tmp_path):
    """Monorepo with nested package.json files and a node_modules copy."""
    write_file("package.json", json.dumps({"name": "monorepo", "scripts": {"lint": "eslint ."}}))
    write_file("packages/pkg1/package.json", json.dumps({"name": "pkg1", "scripts": {"test": "jest"}}))
    write_file(
        "node_modules/dep/package.json",
        json.dumps({"name": "dep", "scripts": {"prepare": "echo"}}),
    )
    return tmp_path


@pytest.fixture
def malformed_package_json(write_file, tmp_path):
    """Package.json with invalid JSON."""
    write_file("package.json", '{"name": "broken", "scripts": {')
    return tmp_path


# VS Code tasks fixtures
@pytest.fixture
def vscode_tasks_with_comments(write_file, tmp_path):
    """VS Code tasks.json with JSONC comments."""
    write_file(
        ".vscode/tasks.json",
        '''
        {
            // Configuration version
            "version": "2.0.0",
            /* Task definitions */
            "tasks": [
                {
                    "label": "test", // Run tests
                    "type": "shell",
                    "command": "npm",
                    "args": ["test", {"value": "--coverage", "quoting": "escape"}]
                },
                {
                    "label": "docs",
                    "command": "curl",
                    "args": ["https://example.com/docs"],
                    "group": {"kind": "build", "isDefault": true}
                },
                {
                    "type": "npm",
                    "script": "unlabelled"
                }
            ]
        }
        ''',
    )
    return tmp_path
