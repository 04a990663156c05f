"""Tests for the command-line interface."""

import json

from click.testing import CliRunner

from task_explorer.cli import main
from task_explorer.core.config import CONFIG_FILE_NAME


class TestCli:
    """End-to-end tests through the click command."""

    def test_list_detectors(self):
        runner = CliRunner()
        result = runner.invoke(main, ["--list-detectors"])

        assert result.exit_code == 0
        assert "Available detectors:" in result.output
        assert "  - ant:" in result.output

    def test_text_output(self, ant_project):
        runner = CliRunner()
        result = runner.invoke(main, [str(ant_project)])

        assert result.exit_code == 0
        assert "ant (sub2)" in result.output

    def test_json_output(self, npm_package):
        runner = CliRunner()
        result = runner.invoke(main, [str(npm_package), "--format", "json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["total_tasks"] == 2

    def test_no_tasks_exit_code(self, tmp_path):
        """Test exit code 1 when nothing was found."""
        runner = CliRunner()
        result = runner.invoke(main, [str(tmp_path)])

        assert result.exit_code == 1
        assert "No tasks found" in result.output

    def test_type_filter(self, ant_project, npm_package):
        runner = CliRunner()
        result = runner.invoke(main, [str(ant_project), "--type", "npm", "-f", "json"])

        data = json.loads(result.output)
        types = {f["type"] for f in data["folders"][0]["files"]}
        assert types == {"npm"}

    def test_config_file_discovered(self, ant_project, write_file):
        """Test .taskexplorer.yml in the folder is picked up."""
        write_file(CONFIG_FILE_NAME, "enable_ant: false\n")

        runner = CliRunner()
        result = runner.invoke(main, [str(ant_project)])

        assert result.exit_code == 1

    def test_explicit_config(self, ant_project, tmp_path_factory):
        config = tmp_path_factory.mktemp("cfg") / "settings.yml"
        config.write_text("exclude:\n  - sub1\n  - sub2\n")

        runner = CliRunner()
        result = runner.invoke(main, [str(ant_project), "--config", str(config), "-f", "json"])

        data = json.loads(result.output)
        assert data["total_tasks"] == 3

    def test_multiple_folders(self, tmp_path):
        (tmp_path / "one").mkdir()
        (tmp_path / "two").mkdir()
        (tmp_path / "two" / "Makefile").write_text("all:\n")

        runner = CliRunner()
        result = runner.invoke(main, [str(tmp_path / "one"), str(tmp_path / "two"), "-f", "json"])

        data = json.loads(result.output)
        assert [f["name"] for f in data["folders"]] == ["two"]
