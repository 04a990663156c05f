"""Text scanning and file search utilities shared by every detector."""

import asyncio
import logging
import os
import re
import sys
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Iterator, Optional

from .errors import ConfigurationError
from .models import Match

logger = logging.getLogger(__name__)

# Files larger than this are skipped rather than read into memory
MAX_FILE_SIZE = 10 * 1024 * 1024


def is_windows() -> bool:
    """Return True when running on Windows (drives executable defaults)."""
    return sys.platform == "win32"


def iter_lines(text: str) -> Iterator[tuple[int, str]]:
    """
    Iterate over the lines of raw file content.

    The last line is yielded even when the content has no trailing newline.

    Args:
        text: Raw file content

    Yields:
        ``(line_number, line)`` tuples, 1-indexed, without line terminators
    """
    for index, line in enumerate(text.splitlines(), start=1):
        yield index, line


def find_pattern(text: str, pattern: str | re.Pattern, name: str = "") -> list[Match]:
    """
    Find every occurrence of a regex pattern in text.

    Args:
        text: Text to search
        pattern: Regex string or compiled pattern
        name: Pattern name recorded on each match

    Returns:
        List of Match objects, in order of appearance
    """
    if not text:
        return []

    compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
    matches = []

    for match in compiled.finditer(text):
        matches.append(Match(
            pattern_name=name or compiled.pattern,
            matched_text=match.group(),
            start_position=match.start(),
            end_position=match.end(),
            line_number=_position_to_line(text, match.start()),
            groups=tuple(g or "" for g in match.groups()),
        ))

    return matches


def contains_pattern(text: str, pattern: str | re.Pattern) -> bool:
    """Return True if the pattern occurs anywhere in text."""
    if not text:
        return False
    compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
    return compiled.search(text) is not None


def expand_braces(pattern: str) -> list[str]:
    """
    Expand ``{a,b}`` alternations in a glob pattern.

    Examples:
        "**/*.{sh,py}" -> ["**/*.sh", "**/*.py"]
        "{**/build.xml,**/*.ant.xml}" -> ["**/build.xml", "**/*.ant.xml"]
    """
    start = pattern.find("{")
    if start == -1:
        return [pattern]

    depth = 0
    for end in range(start, len(pattern)):
        if pattern[end] == "{":
            depth += 1
        elif pattern[end] == "}":
            depth -= 1
            if depth == 0:
                break
    else:
        # Unbalanced brace, treat literally
        return [pattern]

    # Split the body on top level commas only
    options = []
    depth = 0
    current = ""
    for char in pattern[start + 1:end]:
        if char == "," and depth == 0:
            options.append(current)
            current = ""
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
        current += char
    options.append(current)

    prefix, suffix = pattern[:start], pattern[end + 1:]
    expanded = []
    for option in options:
        expanded.extend(expand_braces(prefix + option + suffix))
    return expanded


@lru_cache(maxsize=256)
def glob_to_regex(pattern: str) -> re.Pattern:
    """
    Translate a workspace glob into a compiled regex over posix paths.

    Supports ``**`` (any number of directories), ``*``, ``?``, ``[...]``
    character classes and ``{a,b}`` alternation.
    """
    alternatives = []
    for expanded in expand_braces(pattern):
        regex = ""
        i = 0
        while i < len(expanded):
            char = expanded[i]
            if expanded.startswith("**/", i):
                regex += "(?:.*/)?"
                i += 3
                continue
            if expanded.startswith("**", i):
                regex += ".*"
                i += 2
                continue
            if char == "*":
                regex += "[^/]*"
            elif char == "?":
                regex += "[^/]"
            elif char == "[":
                close = expanded.find("]", i + 1)
                if close == -1:
                    regex += re.escape(char)
                else:
                    body = expanded[i + 1:close]
                    if body.startswith("!"):
                        body = "^" + body[1:]
                    regex += f"[{body}]"
                    i = close
            else:
                regex += re.escape(char)
            i += 1
        alternatives.append(regex)

    return re.compile("^(?:" + "|".join(alternatives) + ")$")


def matches_glob(relative_path: str, pattern: str) -> bool:
    """Return True if a folder-relative posix path matches the glob."""
    return glob_to_regex(pattern).match(relative_path) is not None


def is_excluded(path: str | Path, excludes: Iterable[str]) -> bool:
    """
    Test a path against the configured exclusion list.

    Each entry may be a glob (``**/node_modules/**``) or a plain path
    fragment; a path is excluded when it matches a glob or contains the
    fragment.

    Args:
        path: Path to test (absolute or relative)
        excludes: Exclusion globs / substrings

    Returns:
        True if the path is excluded
    """
    posix = Path(path).as_posix() if isinstance(path, Path) else path.replace("\\", "/")

    for exclude in excludes:
        if not exclude:
            continue
        normalized = exclude.replace("\\", "/")
        if glob_to_regex(normalized).match(posix.lstrip("/")):
            return True
        if not any(ch in normalized for ch in "*?[{") and normalized in posix:
            return True

    return False


def relative_dir(file_path: Path, folder_path: Path) -> str:
    """
    Directory of a file relative to its workspace folder.

    Returns:
        Posix style path, ``""`` for files at the folder root
    """
    try:
        relative = Path(file_path).parent.relative_to(folder_path)
    except ValueError:
        return ""
    posix = relative.as_posix()
    return "" if posix == "." else posix


def find_files_by_glob(
    folder: Path,
    include_glob: str,
    exclude_glob: Optional[str] = None,
    excludes: Iterable[str] = (),
) -> list[Path]:
    """
    Find files under a folder matching a glob.

    Directories matching the exclusion list are pruned while walking.

    Args:
        folder: Workspace folder root
        include_glob: Folder-relative glob of files to return
        exclude_glob: Optional folder-relative glob of files to skip
        excludes: Configured exclusion globs / substrings

    Returns:
        Sorted list of absolute file paths
    """
    folder = Path(folder)
    excludes = list(excludes)
    include = glob_to_regex(include_glob)
    exclude = glob_to_regex(exclude_glob) if exclude_glob else None
    found = []

    for dirpath, dirnames, filenames in os.walk(folder):
        current = Path(dirpath)
        rel_dir = "" if current == folder else current.relative_to(folder).as_posix()

        # Prune excluded directories in place
        dirnames[:] = sorted(
            d for d in dirnames
            if not is_excluded(f"{rel_dir}/{d}/" if rel_dir else f"{d}/", excludes)
        )

        for filename in filenames:
            rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
            if not include.match(rel_path):
                continue
            if exclude and exclude.match(rel_path):
                continue
            file_path = current / filename
            if is_excluded(file_path, excludes) or is_excluded(rel_path, excludes):
                continue
            found.append(file_path)

    return sorted(found)


def read_file(path: Path) -> str:
    """
    Read a whole text file.

    Raises:
        OSError: If the file vanished, is unreadable, or is too large
    """
    path = Path(path)
    if path.stat().st_size > MAX_FILE_SIZE:
        raise OSError(f"{path} exceeds {MAX_FILE_SIZE} bytes")
    with open(path, encoding="utf-8", errors="replace") as f:
        return f.read()


async def read_file_async(path: Path) -> str:
    """
    Asynchronous variant of :func:`read_file`.

    Yields to the event loop before reading so concurrent scans interleave
    at file boundaries; the read itself happens on the loop thread.
    """
    await asyncio.sleep(0)
    return read_file(path)


def resolve_executable(override: Optional[str], default: str) -> str:
    """
    Pick the executable for a tool.

    Args:
        override: Configured path-to-executable, may be empty
        default: Hardcoded executable name

    Returns:
        The override when it is usable, otherwise the default
    """
    if override is None or override == "":
        return default
    try:
        return _validate_executable(override)
    except ConfigurationError as e:
        logger.warning(f"Ignoring executable override: {e}; using '{default}'")
        return default


def _validate_executable(value) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"expected a string, got {type(value).__name__}")
    stripped = value.strip()
    if not stripped or "\n" in stripped or "\0" in stripped:
        raise ConfigurationError(f"invalid executable path {value!r}")
    return stripped


def quote_if_spaced(value: str) -> str:
    """Wrap a command line token in double quotes if it contains whitespace."""
    if any(ch.isspace() for ch in value):
        return f'"{value}"'
    return value


def _position_to_line(text: str, position: int) -> int:
    """
    Convert character position to line number.

    Args:
        text: Full text
        position: Character offset

    Returns:
        Line number (1-indexed)
    """
    if not text or position < 0:
        return 1

    return text[:position].count('\n') + 1
