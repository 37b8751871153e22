"""Process-tree resource sampling and segmented telemetry reporting."""

__version__ = "0.1.0"
