"""Config fingerprinting for build reports."""

from __future__ import annotations

import hashlib
import json

from uefast.config.model import UefastConfig


def config_fingerprint(config: UefastConfig) -> str:
    """Return a stable hash of the settings that influence a build's output."""
    payload = {
        "content_dir": config.content_dir,
        "mount_point": config.mount_point,
        "include_globs": list(config.include_globs),
        "exclude_globs": list(config.exclude_globs),
        "startup_roots": list(config.startup_roots),
        "maps_are_startup_roots": config.maps_are_startup_roots,
        "parallelism": config.parallelism,
        "per_asset_overhead_seconds": config.cost.per_asset_overhead_seconds,
        "seconds_per_megabyte": config.cost.seconds_per_megabyte,
    }
    blob = json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")
    return hashlib.sha256(blob).hexdigest()
