"""Task Explorer - discover build and automation tasks across a workspace."""

__version__ = "0.1.0"
