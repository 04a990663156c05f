"""Configuration source for Task Explorer, loaded from YAML."""

import logging
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".taskexplorer.yml"

DEFAULT_EXCLUDES = [
    "**/node_modules/**",
    "**/bower_components/**",
    "**/.vscode-test/**",
]

# Keys whose change invalidates every cache
GLOBAL_SCAN_KEYS = {"exclude", "enable_ansicon_for_ant", "path_to_ansicon"}


class Configuration(BaseModel):
    """
    Key-value settings consumed by the detectors and the tree builder.

    Enable flags are named ``enable_<type>`` and executable overrides
    ``path_to_<tool>``. Flags for task types contributed by external
    providers may be given as extra keys (e.g. ``enable_cargo: true``).
    """

    model_config = ConfigDict(extra="allow")

    exclude: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDES),
        description="Globs / path fragments never scanned",
    )
    include_ant: list[str] = Field(
        default_factory=list, description="Extra globs for Ant build files"
    )

    enable_ant: bool = True
    enable_app_publisher: bool = True
    enable_bash: bool = True
    enable_batch: bool = True
    enable_gradle: bool = True
    enable_grunt: bool = True
    enable_gulp: bool = True
    enable_make: bool = True
    enable_npm: bool = True
    enable_nsis: bool = True
    enable_perl: bool = True
    enable_powershell: bool = True
    enable_python: bool = True
    enable_ruby: bool = True
    enable_tsc: bool = True
    enable_workspace: bool = True

    enable_ansicon_for_ant: bool = Field(
        False, description="Wrap ant in ansicon for colored output (Windows)"
    )
    path_to_ansicon: Optional[str] = None

    path_to_ant: Optional[str] = None
    path_to_app_publisher: Optional[str] = None
    path_to_bash: Optional[str] = None
    path_to_gradle: Optional[str] = None
    path_to_make: Optional[str] = None
    path_to_nsis: Optional[str] = None
    path_to_perl: Optional[str] = None
    path_to_powershell: Optional[str] = None
    path_to_python: Optional[str] = None
    path_to_ruby: Optional[str] = None

    @field_validator("exclude", "include_ant", mode="before")
    @classmethod
    def validate_glob_list(cls, v):
        """Accept a single glob string where a list is expected."""
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return v

    @field_validator(
        "path_to_ansicon",
        "path_to_ant",
        "path_to_app_publisher",
        "path_to_bash",
        "path_to_gradle",
        "path_to_make",
        "path_to_nsis",
        "path_to_perl",
        "path_to_powershell",
        "path_to_python",
        "path_to_ruby",
        mode="before",
    )
    @classmethod
    def validate_executable_path(cls, v, info):
        """Drop unusable overrides so the hardcoded default is used instead."""
        if v is None or isinstance(v, str):
            return v
        logger.warning(f"Ignoring {info.field_name}: expected a string, got {v!r}")
        return None

    @classmethod
    def load(cls, path: Optional[Path]) -> "Configuration":
        """
        Load configuration from a YAML file.

        Missing, unreadable or invalid files are logged and the defaults
        are returned; configuration problems are never fatal.

        Args:
            path: Path to the YAML file (None = defaults)

        Returns:
            Configuration instance
        """
        if path is None or not Path(path).exists():
            return cls()

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            if not isinstance(data, dict):
                raise ConfigurationError(f"{path}: top level must be a mapping")
            config = cls(**data)
            logger.info(f"Loaded configuration from {path}")
            return config

        except (OSError, yaml.YAMLError, ValidationError, ConfigurationError) as e:
            logger.error(f"Failed to load configuration {path}: {e}")
            return cls()

    def get(self, key: str, default: Any = None) -> Any:
        """Return a setting by key."""
        return getattr(self, key, default)

    def is_enabled(self, task_type: str) -> bool:
        """Return the enable flag for a task type; unknown types are disabled."""
        return bool(self.get(f"enable_{task_type.replace('-', '_')}", False))

    def executable_override(self, tool: str) -> Optional[str]:
        """Return the configured path-to-executable for a tool, if any."""
        return self.get(f"path_to_{tool.replace('-', '_')}")

    def changed_keys(self, other: "Configuration") -> set[str]:
        """Return the keys whose values differ between two configurations."""
        mine = self.model_dump()
        theirs = other.model_dump()
        return {
            key
            for key in set(mine) | set(theirs)
            if mine.get(key) != theirs.get(key)
        }


def find_config_file(folders: list[Path]) -> Optional[Path]:
    """Return the first ``.taskexplorer.yml`` found in the given folders."""
    for folder in folders:
        candidate = Path(folder) / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
    return None
