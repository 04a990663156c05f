"""Error types raised inside the discovery engine.

None of these are fatal: detectors and the engine catch them at the
per-file seam, log them, and carry on with whatever else they found.
"""


class ParseError(ValueError):
    """A task file could not be parsed (malformed XML/JSON, wrong root, ...)."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class ConfigurationError(ValueError):
    """A configuration value is missing, malformed or unusable."""
