"""Root exception type for uefast."""

from __future__ import annotations


class UefastError(Exception):
    """Base class for all errors raised by uefast."""
