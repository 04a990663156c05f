"""Core discovery engine: models, scanning utilities, caches and tree builder."""
