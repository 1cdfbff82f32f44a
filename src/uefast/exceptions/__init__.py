"""Shared exception hierarchy for uefast."""

from __future__ import annotations

from .base import UefastError
from .cache import CacheFormatError
from .config import ConfigError
from .graph import GraphCycleError
from .parsing import AssetParseError
from .project import ProjectIOError

__all__ = [
    "AssetParseError",
    "CacheFormatError",
    "ConfigError",
    "GraphCycleError",
    "ProjectIOError",
    "UefastError",
]
