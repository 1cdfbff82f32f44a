"""Config data model for uefast builds."""

from __future__ import annotations

import os
from dataclasses import dataclass

from uefast.constants.config import (
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
    MAX_AUTO_WORKERS,
)


@dataclass(frozen=True)
class CostConfig:
    """Per-asset load cost model settings."""

    per_asset_overhead_seconds: float = DEFAULT_PER_ASSET_OVERHEAD_SECONDS
    seconds_per_megabyte: float = DEFAULT_SECONDS_PER_MEGABYTE


@dataclass(frozen=True)
class UefastConfig:
    """Resolved engine config, passed explicitly to every stage."""

    content_dir: str = DEFAULT_CONTENT_DIR
    mount_point: str = DEFAULT_MOUNT_POINT
    include_globs: tuple[str, ...] = DEFAULT_INCLUDE_GLOBS
    exclude_globs: tuple[str, ...] = DEFAULT_EXCLUDE_GLOBS
    startup_roots: tuple[str, ...] = DEFAULT_STARTUP_ROOTS
    maps_are_startup_roots: bool = DEFAULT_MAPS_ARE_STARTUP_ROOTS
    workers: int = DEFAULT_WORKERS
    parallelism: int = DEFAULT_PARALLELISM
    cost: CostConfig = CostConfig()

    @property
    def effective_workers(self) -> int:
        """Collector pool size; ``0`` means derive from the CPU count."""
        if self.workers > 0:
            return self.workers
        return min(MAX_AUTO_WORKERS, (os.cpu_count() or 1) + 4)
