"""Tests for the npm detector."""

import asyncio
import json

from task_explorer.core.config import Configuration
from task_explorer.detectors.npm import NpmDetector, build_install_task


class TestNpmDetector:
    """Tests for package.json script detection."""

    def test_metadata(self):
        """Test the detector declares an install helper."""
        metadata = NpmDetector().get_metadata()

        assert metadata["name"] == "npm"
        assert metadata["install_helper"] is True

    def test_scripts(self, npm_package, workspace, config):
        tasks = asyncio.run(NpmDetector().scan(workspace, config))

        assert [t.name for t in tasks] == ["build", "test", "install"]
        assert tasks[0].invocation.command == "npm"
        assert tasks[0].invocation.args == ["run", "build"]
        assert tasks[0].file_name == "package.json"

    def test_monorepo_skips_node_modules(self, npm_monorepo, workspace, config):
        """Test nested packages are found and node_modules is ignored."""
        tasks = asyncio.run(NpmDetector().scan(workspace, config))

        assert sorted(t.name for t in tasks) == ["lint", "test"]
        assert {t.relative_path for t in tasks} == {"", "packages/pkg1"}

    def test_node_modules_skipped_without_exclude(self, npm_monorepo, workspace):
        tasks = asyncio.run(NpmDetector().scan(workspace, Configuration(exclude=[])))

        assert "prepare" not in {t.name for t in tasks}

    def test_malformed_package_json(self, malformed_package_json, workspace, config, caplog):
        """Test handling of malformed JSON."""
        tasks = asyncio.run(NpmDetector().scan(workspace, config))

        assert tasks == []
        assert "malformed JSON" in caplog.text

    def test_non_string_scripts_ignored(self, write_file, workspace, config):
        write_file("package.json", json.dumps({"scripts": {"ok": "x", "bad": 1}}))

        tasks = asyncio.run(NpmDetector().scan(workspace, config))

        assert [t.name for t in tasks] == ["ok"]

    def test_install_task(self, npm_package, folder):
        task = build_install_task(folder.path / "package.json", folder)

        assert task.name == "install"
        assert task.invocation.args == ["install"]
        assert task.invocation.cwd == folder.path
