"""Script file detector (bash, batch, python, ruby, powershell, perl, nsis)."""

from .detector import SCRIPT_TABLE, ScriptDetector, ScriptType

# Detector class exposed for engine discovery
DETECTOR_CLASS = ScriptDetector

__all__ = ["ScriptDetector", "ScriptType", "SCRIPT_TABLE", "DETECTOR_CLASS"]
