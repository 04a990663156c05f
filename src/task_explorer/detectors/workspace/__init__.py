"""VS Code workspace tasks.json detector."""

from .detector import WorkspaceTasksDetector, strip_json_comments

# Detector class exposed for engine discovery
DETECTOR_CLASS = WorkspaceTasksDetector

__all__ = ["WorkspaceTasksDetector", "DETECTOR_CLASS", "strip_json_comments"]
