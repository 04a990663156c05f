"""Gulp file detector."""

from .detector import GulpDetector, find_gulp_tasks

# Detector class exposed for engine discovery
DETECTOR_CLASS = GulpDetector

__all__ = ["GulpDetector", "DETECTOR_CLASS", "find_gulp_tasks"]
