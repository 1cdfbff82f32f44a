"""Dependency graph exceptions."""

from __future__ import annotations

from uefast.exceptions.base import UefastError


class GraphCycleError(UefastError, ValueError):
    """Raised when a hard-dependency cycle reaches load-order layering."""
