"""Gradle build script detector."""

from .detector import GradleDetector, find_gradle_tasks

# Detector class exposed for engine discovery
DETECTOR_CLASS = GradleDetector

__all__ = ["GradleDetector", "DETECTOR_CLASS", "find_gradle_tasks"]
