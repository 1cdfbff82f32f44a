"""Project and output path I/O exceptions."""

from __future__ import annotations

from uefast.exceptions.base import UefastError


class ProjectIOError(UefastError, OSError):
    """Raised when a project root, content directory, or output path is unusable."""
