"""Cache validation against the live project state.

``validate_cache`` is a pure query: every failure becomes a verdict with a
reason code, so callers can fall back to a normal startup without handling
exceptions.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from uefast.cache.codec import CORRUPT, decode_cache
from uefast.config import UefastConfig
from uefast.exceptions import CacheFormatError
from uefast.model import diff_hash_tables
from uefast.scanner import collect_assets

logger = logging.getLogger(__name__)


class ReasonCode(str, Enum):
    """Why a cache was accepted or rejected."""

    MISSING = "missing"
    BAD_MAGIC = "bad_magic"
    UNSUPPORTED_VERSION = "unsupported_version"
    CHECKSUM_MISMATCH = "checksum_mismatch"
    STALE = "stale"
    VALID = "valid"


@dataclass(frozen=True)
class CacheVerdict:
    """Validity verdict for a cache file."""

    reason: ReasonCode
    detail: str = ""
    added: tuple[str, ...] = ()
    removed: tuple[str, ...] = ()
    changed: tuple[str, ...] = ()
    asset_count: int = 0

    @property
    def valid(self) -> bool:
        return self.reason is ReasonCode.VALID

    def to_dict(self) -> dict[str, object]:
        return {
            "valid": self.valid,
            "reason": self.reason.value,
            "detail": self.detail,
            "assetCount": self.asset_count,
            "added": list(self.added),
            "removed": list(self.removed),
            "changed": list(self.changed),
        }


def validate_cache(cache_path: Path, live_hashes: Mapping[str, int]) -> CacheVerdict:
    """Check magic, version, checksum, and staleness of the cache at *cache_path*."""
    try:
        data = cache_path.read_bytes()
    except FileNotFoundError:
        return CacheVerdict(ReasonCode.MISSING, f"Cache file not found: {cache_path}")
    except OSError as exc:
        return CacheVerdict(ReasonCode.MISSING, f"Cache file unreadable: {cache_path} ({exc})")

    try:
        contents = decode_cache(data)
    except CacheFormatError as exc:
        if exc.reason == CORRUPT:
            reason = ReasonCode.CHECKSUM_MISMATCH
            detail = f"Cache body is structurally corrupt: {exc}"
        else:
            reason = ReasonCode(exc.reason)
            detail = str(exc)
        logger.debug("Cache %s rejected: %s", cache_path, detail)
        return CacheVerdict(reason, detail)

    added, removed, changed = diff_hash_tables(contents.hash_table, live_hashes)
    asset_count = len(contents.hash_table)
    if added or removed or changed:
        detail = f"{len(added)} added, {len(removed)} removed, {len(changed)} changed assets"
        return CacheVerdict(
            ReasonCode.STALE,
            detail,
            added=added,
            removed=removed,
            changed=changed,
            asset_count=asset_count,
        )
    return CacheVerdict(ReasonCode.VALID, f"{asset_count} assets match", asset_count=asset_count)


def verify_project_cache(
    cache_path: Path,
    project_root: Path,
    config: UefastConfig,
    *,
    workers: int | None = None,
) -> CacheVerdict:
    """Collect live hashes for *project_root* and validate the cache against them.

    Unlike ``validate_cache`` this propagates ``ProjectIOError`` when the
    project itself cannot be scanned.
    """
    collection = collect_assets(project_root, config, workers=workers)
    return validate_cache(cache_path, collection.hash_table())
