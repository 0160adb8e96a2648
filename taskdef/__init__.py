"""Read, merge and query Taskfile task definitions."""

__version__ = "0.1.0"