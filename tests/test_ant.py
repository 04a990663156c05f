"""Tests for the Ant detector."""

import asyncio

import pytest

from task_explorer.core import scanner
from task_explorer.core.config import Configuration
from task_explorer.core.errors import ParseError
from task_explorer.detectors.ant import ANSI_COLOR_LOGGER, AntDetector, parse_ant_targets


class TestParseAntTargets:
    """Tests for build.xml target extraction."""

    def test_targets_and_default(self, ant_build):
        assert parse_ant_targets(ant_build) == [
            ("clean", False),
            ("compile", True),
            ("dist", False),
        ]

    def test_namespaced_project(self):
        content = '<p:project xmlns:p="urn:x"><p:target name="a"/></p:project>'

        assert parse_ant_targets(content) == [("a", False)]

    def test_unnamed_and_duplicate_targets_skipped(self):
        content = '<project><target/><target name="a"/><target name="a"/></project>'

        assert parse_ant_targets(content) == [("a", False)]

    @pytest.mark.parametrize(
        "content, reason",
        [
            ("<project><target name='a'>", "malformed XML"),
            ("<build><target name='a'/></build>", "<project>"),
            ("<project name='empty'/>", "any targets"),
        ],
    )
    def test_invalid_content(self, content, reason):
        with pytest.raises(ParseError) as exc_info:
            parse_ant_targets(content)

        assert reason in exc_info.value.reason


class TestAntDetector:
    """Tests for AntDetector scanning."""

    def test_metadata(self):
        detector = AntDetector()

        assert detector.name == "ant"
        assert "**/[Bb]uild.xml" in detector.get_supported_files()

    def test_scan_build_xml(self, write_file, ant_build, workspace, config):
        """Test default target naming and plain build.xml invocation."""
        write_file("build.xml", ant_build)

        tasks = asyncio.run(AntDetector().scan(workspace, config))

        assert [t.name for t in tasks] == ["clean", "compile - Default", "dist"]
        compile_task = tasks[1]
        assert compile_task.is_default
        assert compile_task.payload.target == "compile"
        assert compile_task.invocation.command == "ant"
        assert compile_task.invocation.args == ["compile"]
        assert compile_task.relative_path == ""

    def test_capitalised_build_file_uses_f(self, write_file, ant_build, workspace, config):
        """Test files not literally named build.xml are passed with -f."""
        write_file("sub/Build.xml", ant_build)

        tasks = asyncio.run(AntDetector().scan(workspace, config))

        assert tasks[0].invocation.args == ["-f", "Build.xml", "clean"]
        assert tasks[0].relative_path == "sub"

    def test_include_ant_globs(self, write_file, ant_build, workspace):
        write_file("ci/deploy.xml", ant_build)
        config = Configuration(include_ant=["**/deploy.xml"])

        tasks = asyncio.run(AntDetector().scan(workspace, config))

        assert len(tasks) == 3
        assert tasks[0].invocation.args == ["-f", "deploy.xml", "clean"]

    def test_malformed_file_skipped(self, write_file, ant_build, workspace, config, caplog):
        """Test a broken build file does not hide the others."""
        write_file("build.xml", ant_build)
        write_file("broken/build.xml", "<project><target name=")

        tasks = asyncio.run(AntDetector().scan(workspace, config))

        assert len(tasks) == 3
        assert "malformed XML" in caplog.text

    def test_executable_override(self, folder, tmp_path):
        detector = AntDetector()
        config = Configuration(path_to_ant="/opt/ant/bin/ant")

        assert detector.build_command(tmp_path / "build.xml", "dist", config) == (
            "/opt/ant/bin/ant",
            ["dist"],
        )

    def test_windows_ansicon(self, monkeypatch, tmp_path):
        """Test the colorizing wrapper prefixes ant on Windows."""
        monkeypatch.setattr(scanner, "is_windows", lambda: True)
        config = Configuration(enable_ansicon_for_ant=True)

        command, args = AntDetector().build_command(tmp_path / "build.xml", "dist", config)

        assert command == "ansicon.exe"
        assert args == ["ant.bat", "-logger", ANSI_COLOR_LOGGER, "dist"]

    def test_windows_override_gets_bat(self, monkeypatch, tmp_path):
        monkeypatch.setattr(scanner, "is_windows", lambda: True)
        config = Configuration(path_to_ant="C:\\ant\\bin\\ant")

        command, _ = AntDetector().build_command(tmp_path / "build.xml", "dist", config)

        assert command == "C:\\ant\\bin\\ant.bat"
