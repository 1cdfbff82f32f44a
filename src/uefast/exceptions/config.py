"""Configuration-related exceptions."""

from __future__ import annotations

from uefast.exceptions.base import UefastError


class ConfigError(UefastError, ValueError):
    """Raised when engine configuration is invalid."""
