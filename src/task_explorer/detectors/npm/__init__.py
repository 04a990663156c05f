"""npm package.json scripts detector."""

from .detector import NpmDetector, build_install_task

# Detector class exposed for engine discovery
DETECTOR_CLASS = NpmDetector

__all__ = ["NpmDetector", "DETECTOR_CLASS", "build_install_task"]
