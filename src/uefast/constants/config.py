"""Configuration defaults and filenames."""

from __future__ import annotations

CONFIG_FILENAME: str = "uefast.yaml"

DEFAULT_CONTENT_DIR: str = "Content"
DEFAULT_MOUNT_POINT: str = "/Game"
DEFAULT_INCLUDE_GLOBS: tuple[str, ...] = ("**/*.uasset", "**/*.umap")
DEFAULT_EXCLUDE_GLOBS: tuple[str, ...] = ()
DEFAULT_STARTUP_ROOTS: tuple[str, ...] = ("*[Ss]tartup*",)
DEFAULT_MAPS_ARE_STARTUP_ROOTS: bool = True

DEFAULT_WORKERS: int = 0
MAX_AUTO_WORKERS: int = 32
DEFAULT_PARALLELISM: int = 4

DEFAULT_PER_ASSET_OVERHEAD_SECONDS: float = 0.002
DEFAULT_SECONDS_PER_MEGABYTE: float = 0.01

ALLOWED_CONFIG_KEYS: frozenset[str] = frozenset(
    {
        "content_dir",
        "mount_point",
        "include_globs",
        "exclude_globs",
        "startup_roots",
        "maps_are_startup_roots",
        "workers",
        "parallelism",
        "cost",
    }
)
ALLOWED_COST_KEYS: frozenset[str] = frozenset({"per_asset_overhead_seconds", "seconds_per_megabyte"})
