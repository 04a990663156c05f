"""Task detectors, one sub-package per supported file format."""
