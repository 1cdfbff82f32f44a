"""Configuration loading and normalization for uefast builds.

This package facade re-exports the public names so callers can use
``from uefast.config import ...``.
"""

from __future__ import annotations

from uefast.config.fingerprint import config_fingerprint
from uefast.config.loader import load_config
from uefast.config.model import CostConfig, UefastConfig

__all__ = [
    "CostConfig",
    "UefastConfig",
    "config_fingerprint",
    "load_config",
]
