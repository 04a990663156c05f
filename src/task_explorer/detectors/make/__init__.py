"""Makefile detector."""

from .detector import MakeDetector, find_make_targets

# Detector class exposed for engine discovery
DETECTOR_CLASS = MakeDetector

__all__ = ["MakeDetector", "DETECTOR_CLASS", "find_make_targets"]
