"""Config loading and normalization for uefast builds."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from uefast.config.model import CostConfig, UefastConfig
from uefast.constants.config import (
    ALLOWED_CONFIG_KEYS,
    ALLOWED_COST_KEYS,
    CONFIG_FILENAME,
    DEFAULT_CONTENT_DIR,
    DEFAULT_EXCLUDE_GLOBS,
    DEFAULT_INCLUDE_GLOBS,
    DEFAULT_MAPS_ARE_STARTUP_ROOTS,
    DEFAULT_MOUNT_POINT,
    DEFAULT_PARALLELISM,
    DEFAULT_PER_ASSET_OVERHEAD_SECONDS,
    DEFAULT_SECONDS_PER_MEGABYTE,
    DEFAULT_STARTUP_ROOTS,
    DEFAULT_WORKERS,
)
from uefast.exceptions import ConfigError


def load_config(root: Path, config_path: Path | None = None) -> UefastConfig:
    """Load and validate engine config from ``uefast.yaml`` or an explicit path."""
    root = root.resolve()
    path = config_path.resolve() if config_path else (root / CONFIG_FILENAME)
    if not path.exists():
        if config_path is not None:
            raise ConfigError(f"Config file not found: {path}")
        return UefastConfig()

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML config file at {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Cannot read config file at {path}: {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file at {path} must be a YAML mapping")

    unknown = sorted(str(key) for key in raw if key not in ALLOWED_CONFIG_KEYS)
    if unknown:
        raise ConfigError(f"Unknown config key(s) in {path}: {', '.join(unknown)}")

    cost_raw = raw.get("cost", {})
    if cost_raw is None:
        cost_raw = {}
    if not isinstance(cost_raw, dict):
        raise ConfigError("cost must be a mapping")
    unknown_cost = sorted(str(key) for key in cost_raw if key not in ALLOWED_COST_KEYS)
    if unknown_cost:
        raise ConfigError(f"Unknown cost key(s): {', '.join(unknown_cost)}")

    content_dir = _ensure_string(raw.get("content_dir", DEFAULT_CONTENT_DIR), "content_dir")
    mount_point = _ensure_string(raw.get("mount_point", DEFAULT_MOUNT_POINT), "mount_point")
    if not mount_point.startswith("/"):
        raise ConfigError("mount_point must start with '/'")

    include_globs = tuple(
        _ensure_string_list(raw.get("include_globs", list(DEFAULT_INCLUDE_GLOBS)), "include_globs")
    )
    if not include_globs:
        raise ConfigError("include_globs must contain at least one pattern")

    maps_are_startup_roots = raw.get("maps_are_startup_roots", DEFAULT_MAPS_ARE_STARTUP_ROOTS)
    if not isinstance(maps_are_startup_roots, bool):
        raise ConfigError("maps_are_startup_roots must be a boolean")

    workers = raw.get("workers", DEFAULT_WORKERS)
    if isinstance(workers, bool) or not isinstance(workers, int) or workers < 0:
        raise ConfigError("workers must be a non-negative integer")

    parallelism = raw.get("parallelism", DEFAULT_PARALLELISM)
    if isinstance(parallelism, bool) or not isinstance(parallelism, int) or parallelism < 1:
        raise ConfigError("parallelism must be a positive integer")

    return UefastConfig(
        content_dir=content_dir,
        mount_point=mount_point.rstrip("/"),
        include_globs=include_globs,
        exclude_globs=tuple(
            _ensure_string_list(raw.get("exclude_globs", list(DEFAULT_EXCLUDE_GLOBS)), "exclude_globs")
        ),
        startup_roots=tuple(
            _ensure_string_list(raw.get("startup_roots", list(DEFAULT_STARTUP_ROOTS)), "startup_roots")
        ),
        maps_are_startup_roots=maps_are_startup_roots,
        workers=workers,
        parallelism=parallelism,
        cost=CostConfig(
            per_asset_overhead_seconds=_ensure_non_negative_number(
                cost_raw.get("per_asset_overhead_seconds", DEFAULT_PER_ASSET_OVERHEAD_SECONDS),
                "cost.per_asset_overhead_seconds",
            ),
            seconds_per_megabyte=_ensure_non_negative_number(
                cost_raw.get("seconds_per_megabyte", DEFAULT_SECONDS_PER_MEGABYTE),
                "cost.seconds_per_megabyte",
            ),
        ),
    )


def _ensure_string(value: Any, key_name: str) -> str:
    """Require a non-empty string value."""
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{key_name} must be a non-empty string")
    return value.strip()


def _ensure_string_list(value: Any, key_name: str) -> list[str]:
    """Coerce a value to a list of strings, raising ConfigError on type mismatch."""
    if value is None:
        return []
    if not isinstance(value, (list, tuple)) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"{key_name} must be a list of strings")
    return [item.strip() for item in value if item.strip()]


def _ensure_non_negative_number(value: Any, key_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        raise ConfigError(f"{key_name} must be a non-negative number")
    return float(value)
