"""Tests for the Make detector."""

import asyncio

from task_explorer.core import scanner
from task_explorer.detectors.make import MakeDetector, find_make_targets

MAKEFILE = """\
# Build everything
CC := gcc
PREFIX ?= /usr/local
FLAGS += -O2
X ::= y
.PHONY: all clean

all: app docs
\tcc -o app main.c

app docs: main.c
\t@echo building $@

%.o: %.c
\t$(CC) -c $<

$(OUT): all

clean::
\trm -rf out
install: all"""


class TestFindMakeTargets:
    """Tests for Makefile target extraction."""

    def test_targets(self):
        assert find_make_targets(MAKEFILE) == ["all", "app", "docs", "clean", "install"]

    def test_empty(self):
        assert find_make_targets("") == []


class TestMakeDetector:
    """Tests for MakeDetector scanning."""

    def test_scan(self, write_file, workspace, config):
        write_file("Makefile", MAKEFILE)
        write_file("tools/makefile", "lint:\n\truff .\n")

        tasks = asyncio.run(MakeDetector().scan(workspace, config))

        assert [t.name for t in tasks] == ["all", "app", "docs", "clean", "install", "lint"]
        assert tasks[0].invocation.command == "make"
        assert tasks[0].invocation.args == ["all"]
        assert tasks[-1].relative_path == "tools"

    def test_windows_uses_nmake(self, write_file, workspace, config, monkeypatch):
        write_file("Makefile", "all:\n")
        monkeypatch.setattr(scanner, "is_windows", lambda: True)

        tasks = asyncio.run(MakeDetector().scan(workspace, config))

        assert tasks[0].invocation.command == "nmake"
