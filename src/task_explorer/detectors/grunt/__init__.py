"""Grunt file detector."""

from .detector import GruntDetector, find_grunt_tasks

# Detector class exposed for engine discovery
DETECTOR_CLASS = GruntDetector

__all__ = ["GruntDetector", "DETECTOR_CLASS", "find_grunt_tasks"]
