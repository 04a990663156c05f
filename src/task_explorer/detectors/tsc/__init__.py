"""TypeScript tsconfig.json detector."""

from .detector import NAME_SEPARATOR, TscDetector

# Detector class exposed for engine discovery
DETECTOR_CLASS = TscDetector

__all__ = ["TscDetector", "DETECTOR_CLASS", "NAME_SEPARATOR"]
