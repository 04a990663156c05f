"""app-publisher configuration detector."""

from .detector import PUBLISH_TASKS, AppPublisherDetector

# Detector class exposed for engine discovery
DETECTOR_CLASS = AppPublisherDetector

__all__ = ["AppPublisherDetector", "DETECTOR_CLASS", "PUBLISH_TASKS"]
