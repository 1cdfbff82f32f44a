"""Asset metadata collection: discovery, hashing, reference tables, and startup reachability."""

from __future__ import annotations

import fnmatch
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from uefast.config import UefastConfig
from uefast.exceptions import AssetParseError, ConfigError, ProjectIOError
from uefast.graph import reachable_from
from uefast.io import hash_bytes
from uefast.model import AssetRecord, CollectionResult
from uefast.parsers import parse_package_summary, parse_sidecar_file, sidecar_path_for
from uefast.scanner.discovery import (
    asset_id_for,
    asset_kind_for,
    discover_asset_files,
    project_relative_path,
)
from uefast.types import AssetKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _ScannedAsset:
    """Per-file scan output before references are resolved against the whole project."""

    asset_id: str
    path: str
    kind: AssetKind
    content_hash: int
    size_bytes: int
    hard_references: tuple[str, ...]
    soft_references: tuple[str, ...]


@dataclass(frozen=True)
class _ScanOutcome:
    path: str
    asset: _ScannedAsset | None = None
    warning: str | None = None


def read_reference_table(path: Path, data: bytes) -> tuple[tuple[str, ...], tuple[str, ...]]:
    """Return ``(hard, soft)`` references declared by an asset.

    Hard references come from the package import table; a sidecar file,
    when present, adds further hard and soft references.
    """
    summary = parse_package_summary(data, source=str(path))
    hard = set(summary.package_dependencies())
    soft: set[str] = set()

    sidecar = sidecar_path_for(path)
    if sidecar.is_file():
        declared = parse_sidecar_file(sidecar)
        hard.update(declared.hard)
        soft.update(declared.soft)

    return tuple(sorted(hard)), tuple(sorted(soft - hard))


def collect_assets(
    project_root: Path,
    config: UefastConfig,
    *,
    workers: int | None = None,
) -> CollectionResult:
    """Scan a project's content directory into immutable asset records.

    Raises:
        ConfigError: When *workers* is negative.
        ProjectIOError: When the project root or its content directory is
            missing or unreadable. Individual bad assets never raise; they are
            skipped and reported in ``CollectionResult.warnings``.
    """
    if workers is not None and workers < 0:
        raise ConfigError(f"workers must be >= 0, got {workers}")
    root = project_root.resolve()
    if not root.is_dir():
        raise ProjectIOError(f"Project root does not exist or is not a directory: {root}")
    content_root = (root / config.content_dir).resolve()
    if not content_root.is_dir():
        raise ProjectIOError(f"Content directory not found: {content_root}")

    try:
        with os.scandir(content_root):
            pass
        files = discover_asset_files(content_root, config.include_globs, config.exclude_globs)
    except OSError as exc:
        raise ProjectIOError(f"Cannot read content directory {content_root}: {exc}") from exc

    pool_size = workers if workers else config.effective_workers
    logger.info("Scanning %d asset files in %s with %d workers", len(files), content_root, pool_size)
    outcomes = _scan_in_parallel(files, pool_size, root, content_root, config.mount_point)

    warnings: list[str] = []
    skipped: list[str] = []
    scanned: dict[str, _ScannedAsset] = {}
    for outcome in sorted(outcomes, key=lambda outcome: outcome.path):
        if outcome.asset is None:
            warnings.append(outcome.warning or f"Skipped asset: {outcome.path}")
            skipped.append(outcome.path)
            continue
        existing = scanned.get(outcome.asset.asset_id)
        if existing is not None:
            warning = (
                f"Duplicate asset ID '{outcome.asset.asset_id}' for {outcome.path}; "
                f"keeping {existing.path}"
            )
            logger.warning(warning)
            warnings.append(warning)
            skipped.append(outcome.path)
            continue
        scanned[outcome.asset.asset_id] = outcome.asset

    records, roots = _resolve_records(scanned, config)
    logger.info("Collected %d assets (%d skipped)", len(records), len(skipped))
    return CollectionResult(
        records=records,
        warnings=tuple(warnings),
        skipped=tuple(skipped),
        startup_roots=roots,
    )


def _scan_in_parallel(
    files: list[Path],
    pool_size: int,
    project_root: Path,
    content_root: Path,
    mount_point: str,
) -> list[_ScanOutcome]:
    """Scan files on a bounded pool; each worker fills only its own buffer."""
    buffers = [files[offset::pool_size] for offset in range(pool_size)]
    buffers = [buffer for buffer in buffers if buffer]
    if not buffers:
        return []

    with ThreadPoolExecutor(max_workers=len(buffers)) as executor:
        futures = [
            executor.submit(_scan_buffer, buffer, project_root, content_root, mount_point) for buffer in buffers
        ]
        return [outcome for future in futures for outcome in future.result()]


def _scan_buffer(
    paths: list[Path],
    project_root: Path,
    content_root: Path,
    mount_point: str,
) -> list[_ScanOutcome]:
    return [_scan_one(path, project_root, content_root, mount_point) for path in paths]


def _scan_one(path: Path, project_root: Path, content_root: Path, mount_point: str) -> _ScanOutcome:
    relative = project_relative_path(path, project_root)
    try:
        data = path.read_bytes()
    except OSError as exc:
        warning = f"Failed to read asset: {relative} ({exc})"
        logger.warning(warning)
        return _ScanOutcome(path=relative, warning=warning)

    try:
        hard, soft = read_reference_table(path, data)
    except AssetParseError as exc:
        warning = f"Parse error in {relative}: {exc}"
        logger.warning(warning)
        return _ScanOutcome(path=relative, warning=warning)

    return _ScanOutcome(
        path=relative,
        asset=_ScannedAsset(
            asset_id=asset_id_for(path, content_root, mount_point),
            path=relative,
            kind=asset_kind_for(path),
            content_hash=hash_bytes(data),
            size_bytes=len(data),
            hard_references=hard,
            soft_references=soft,
        ),
    )


def _resolve_records(
    scanned: dict[str, _ScannedAsset],
    config: UefastConfig,
) -> tuple[tuple[AssetRecord, ...], tuple[str, ...]]:
    """Drop references to unknown assets and compute startup-critical flags."""
    known = set(scanned)
    hard_by_id: dict[str, tuple[str, ...]] = {}
    soft_by_id: dict[str, tuple[str, ...]] = {}

    for asset_id in sorted(scanned):
        asset = scanned[asset_id]
        unresolved = sorted(
            reference
            for reference in {*asset.hard_references, *asset.soft_references}
            if reference not in known
        )
        for reference in unresolved:
            logger.debug("Dropping unresolved reference %s -> %s", asset_id, reference)
        hard = tuple(ref for ref in asset.hard_references if ref in known and ref != asset_id)
        soft = tuple(
            ref for ref in asset.soft_references if ref in known and ref != asset_id and ref not in hard
        )
        hard_by_id[asset_id] = hard
        soft_by_id[asset_id] = soft

    roots = sorted(
        asset_id
        for asset_id, asset in scanned.items()
        if (config.maps_are_startup_roots and asset.kind == "map")
        or any(fnmatch.fnmatchcase(asset_id, pattern) for pattern in config.startup_roots)
    )
    critical = reachable_from(roots, hard_by_id)

    records = tuple(
        AssetRecord(
            asset_id=asset_id,
            path=scanned[asset_id].path,
            kind=scanned[asset_id].kind,
            content_hash=scanned[asset_id].content_hash,
            size_bytes=scanned[asset_id].size_bytes,
            hard_dependencies=hard_by_id[asset_id],
            soft_dependencies=soft_by_id[asset_id],
            startup_critical=asset_id in critical,
        )
        for asset_id in sorted(scanned)
    )
    return records, tuple(roots)
