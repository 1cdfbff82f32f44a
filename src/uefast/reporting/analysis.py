"""JSON report builders for the ``analyze``, ``scan``, and ``stats`` commands."""

from __future__ import annotations

from collections import defaultdict
from pathlib import Path

from uefast.config import UefastConfig, config_fingerprint
from uefast.constants.reporting import (
    ASSET_TYPE_BY_EXTENSION,
    ASSET_TYPE_BY_NAME_PREFIX,
    BLUEPRINT_COUNT_THRESHOLD,
    BLUEPRINT_IMPACT_SECONDS,
    DUPLICATE_GROUP_IMPACT_SECONDS,
    OTHER_REPORT_TYPE,
    PACKAGE_REPORT_TYPE,
    RECOMMENDATION_PRIORITIES,
    REPORT_TEMP_PREFIX,
    REPORT_TEMP_SUFFIX,
    SCHEMA_VERSION,
    STARTUP_RATIO_IMPACT_SECONDS,
    STARTUP_RATIO_THRESHOLD,
    TEXTURE_COUNT_THRESHOLD,
    TEXTURE_IMPACT_SECONDS,
)
from uefast.exceptions import ProjectIOError
from uefast.io import write_json_atomic
from uefast.model import AssetRecord, CacheContents, CacheHeader
from uefast.pipeline import BuildResult
from uefast.types import JsonObject, JsonValue


def asset_to_dict(record: AssetRecord) -> JsonObject:
    return {
        "id": record.asset_id,
        "path": record.path,
        "kind": record.kind,
        "hash": record.hash_hex,
        "sizeBytes": record.size_bytes,
        "hardDependencies": list(record.hard_dependencies),
        "softDependencies": list(record.soft_dependencies),
        "startupCritical": record.startup_critical,
    }


def find_duplicates(records: tuple[AssetRecord, ...] | list[AssetRecord]) -> list[JsonObject]:
    """Group assets with identical content, largest waste first."""
    groups: dict[int, list[AssetRecord]] = defaultdict(list)
    for record in records:
        groups[record.content_hash].append(record)

    duplicates: list[JsonObject] = []
    for content_hash, members in groups.items():
        if len(members) < 2:
            continue
        members.sort(key=lambda record: record.asset_id)
        duplicates.append(
            {
                "hash": f"{content_hash:016x}",
                "assets": [record.asset_id for record in members],
                "wastedBytes": sum(record.size_bytes for record in members[1:]),
            }
        )
    duplicates.sort(key=lambda group: (-int(group["wastedBytes"]), str(group["hash"])))  # type: ignore[call-overload]
    return duplicates


def report_type_for(record: AssetRecord) -> str:
    """Classify an asset for per-type statistics.

    Non-package files are typed by extension. Packages are typed by the
    conventional name prefix (``T_`` texture, ``BP_`` blueprint, ...) and
    fall back to ``uasset``.
    """
    path = Path(record.path)
    suffix = path.suffix.lower()
    if suffix in ASSET_TYPE_BY_EXTENSION:
        return ASSET_TYPE_BY_EXTENSION[suffix]
    if suffix != ".uasset":
        return OTHER_REPORT_TYPE
    for prefix, report_type in ASSET_TYPE_BY_NAME_PREFIX:
        if path.name.startswith(prefix):
            return report_type
    return PACKAGE_REPORT_TYPE


def type_statistics(records: list[AssetRecord]) -> dict[str, dict[str, int]]:
    """Count and total size per report type, keyed in sorted order."""
    stats: dict[str, dict[str, int]] = {}
    for record in records:
        entry = stats.setdefault(report_type_for(record), {"count": 0, "totalSizeBytes": 0})
        entry["count"] += 1
        entry["totalSizeBytes"] += record.size_bytes
    return dict(sorted(stats.items()))


def generate_recommendations(
    total_assets: int,
    startup_assets: int,
    by_type: dict[str, dict[str, int]],
    duplicate_groups: int = 0,
) -> list[JsonObject]:
    """Rule-based hints for shortening startup, highest priority first."""
    recommendations: list[JsonObject] = []

    startup_ratio = startup_assets / total_assets if total_assets else 0.0
    if startup_ratio > STARTUP_RATIO_THRESHOLD:
        recommendations.append(
            _recommendation(
                "high",
                "Startup",
                f"{int(startup_ratio * 100)}% of assets are loaded at startup. Consider lazy loading.",
                startup_ratio * STARTUP_RATIO_IMPACT_SECONDS,
            )
        )

    textures = by_type.get("texture", {}).get("count", 0)
    if textures > TEXTURE_COUNT_THRESHOLD:
        recommendations.append(
            _recommendation(
                "medium",
                "Textures",
                f"{textures} textures found. Consider using texture streaming.",
                TEXTURE_IMPACT_SECONDS,
            )
        )

    blueprints = by_type.get("blueprint", {}).get("count", 0)
    if blueprints > BLUEPRINT_COUNT_THRESHOLD:
        recommendations.append(
            _recommendation(
                "medium",
                "Blueprints",
                f"{blueprints} blueprints found. Consider nativizing hot paths.",
                BLUEPRINT_IMPACT_SECONDS,
            )
        )

    if duplicate_groups:
        recommendations.append(
            _recommendation(
                "low",
                "Duplicates",
                f"{duplicate_groups} groups of identical assets found. Consider consolidating them.",
                duplicate_groups * DUPLICATE_GROUP_IMPACT_SECONDS,
            )
        )

    recommendations.sort(key=lambda item: RECOMMENDATION_PRIORITIES.index(str(item["priority"])))
    return recommendations


def _recommendation(priority: str, category: str, message: str, impact_seconds: float) -> JsonObject:
    return {
        "priority": priority,
        "category": category,
        "message": message,
        "estimatedImpactSeconds": round(impact_seconds, 6),
    }


def build_analysis_report(result: BuildResult, config: UefastConfig) -> JsonObject:
    """Build the analysis report consumed by the editor plugin."""
    graph = result.graph_result.graph
    records = [graph.assets[asset_id] for asset_id in graph.asset_ids()]
    startup = [record for record in records if record.startup_critical]
    plan = result.plan
    by_type = type_statistics(records)
    duplicates = find_duplicates(records)
    by_type_json: dict[str, JsonValue] = {name: dict(entry) for name, entry in by_type.items()}

    return {
        "schemaVersion": SCHEMA_VERSION,
        "projectName": result.project_root.name,
        "configFingerprint": config_fingerprint(config),
        "assets": [asset_to_dict(record) for record in records],
        "totalAssets": len(records),
        "startupAssets": len(startup),
        "totalSizeBytes": sum(record.size_bytes for record in records),
        "startupSizeBytes": sum(record.size_bytes for record in startup),
        "dependencyCount": len(graph.hard_edges()),
        "softDependencyCount": len(graph.soft_edges()),
        "demotedEdges": [
            {"source": edge.source, "target": edge.target, "cycle": list(edge.cycle)}
            for edge in result.graph_result.demoted_edges
        ],
        "byType": by_type_json,
        "duplicates": duplicates,
        "recommendations": generate_recommendations(len(records), len(startup), by_type, len(duplicates)),
        "parallelism": plan.parallelism,
        "batchCount": len(plan.batches),
        "layerCount": plan.layer_count,
        "estimatedTotalSeconds": round(plan.estimated_total_seconds, 6),
        "serialBaselineSeconds": round(plan.serial_baseline_seconds, 6),
        "estimatedSavingsSeconds": round(plan.estimated_savings_seconds, 6),
        "skippedAssets": list(result.collection.skipped),
        "warnings": list(result.warnings),
    }


def build_asset_list(records: tuple[AssetRecord, ...], extension: str | None = None) -> list[JsonObject]:
    """Render collected assets, optionally restricted to one file extension."""
    suffix = None
    if extension:
        suffix = extension.lower() if extension.startswith(".") else f".{extension.lower()}"
    return [
        asset_to_dict(record)
        for record in records
        if suffix is None or Path(record.path).suffix.lower() == suffix
    ]


def build_cache_stats(header: CacheHeader, contents: CacheContents, size_bytes: int) -> JsonObject:
    """Summarize a decoded cache for the ``stats`` command."""
    graph = contents.graph
    plan = contents.plan
    return {
        "version": header.version,
        "checksum": f"{header.checksum:08x}",
        "bodyLength": header.body_length,
        "sizeBytes": size_bytes,
        "assetCount": len(contents.hash_table),
        "startupAssets": sum(1 for record in graph.assets.values() if record.startup_critical),
        "hardEdges": len(graph.hard_edges()),
        "softEdges": len(graph.soft_edges()),
        "batchCount": len(plan.batches),
        "layerCount": plan.layer_count,
        "parallelism": plan.parallelism,
        "estimatedTotalSeconds": round(plan.estimated_total_seconds, 6),
        "estimatedSavingsSeconds": round(plan.estimated_savings_seconds, 6),
    }


def write_report(path: Path, payload: object) -> None:
    """Write a JSON report atomically, mapping failures to ``ProjectIOError``."""
    try:
        write_json_atomic(path=path, payload=payload, temp_prefix=REPORT_TEMP_PREFIX, temp_suffix=REPORT_TEMP_SUFFIX)
    except OSError as exc:
        raise ProjectIOError(f"Cannot write report {path}: {exc}") from exc
