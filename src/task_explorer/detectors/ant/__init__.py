"""Ant build file detector."""

from .detector import ANSI_COLOR_LOGGER, AntDetector, parse_ant_targets

# Detector class exposed for engine discovery
DETECTOR_CLASS = AntDetector

__all__ = ["AntDetector", "DETECTOR_CLASS", "ANSI_COLOR_LOGGER", "parse_ant_targets"]
