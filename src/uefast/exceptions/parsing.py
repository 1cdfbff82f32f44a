"""Parsing-related exceptions."""

from __future__ import annotations

from uefast.exceptions.base import UefastError


class AssetParseError(UefastError, ValueError):
    """Raised when an asset's metadata or reference table cannot be parsed."""
