"""End-to-end build orchestration.

``analyze_project`` runs collection, graph building, and planning;
``build_cache`` adds the serialization step and the up-to-date check.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path

from uefast.cache import CacheVerdict, encode_cache, validate_cache, write_cache
from uefast.config import UefastConfig
from uefast.graph import build_graph
from uefast.model import CacheContents, CollectionResult, GraphBuildResult, LoadPlan
from uefast.planner import CostModel, optimize_load_order
from uefast.scanner import collect_assets

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildResult:
    """Everything one build invocation derived from the project."""

    project_root: Path
    collection: CollectionResult
    graph_result: GraphBuildResult
    plan: LoadPlan
    duration_seconds: float

    @property
    def warnings(self) -> tuple[str, ...]:
        return self.collection.warnings + self.graph_result.warnings

    def cache_contents(self) -> CacheContents:
        return CacheContents.from_build(self.graph_result.graph, self.plan)


@dataclass(frozen=True)
class CacheBuildOutcome:
    """Result of a ``cache`` request."""

    path: Path
    written: bool
    size_bytes: int
    previous: CacheVerdict | None
    result: BuildResult | None = None


def analyze_project(
    project_root: Path,
    config: UefastConfig,
    *,
    workers: int | None = None,
    parallelism: int | None = None,
    collection: CollectionResult | None = None,
) -> BuildResult:
    """Collect assets, build the graph, and plan the load order."""
    started_at = time.perf_counter()
    root = project_root.resolve()
    if collection is None:
        collection = collect_assets(root, config, workers=workers)
    graph_result = build_graph(collection.records, collection.startup_roots)
    plan = optimize_load_order(
        graph_result.graph,
        CostModel.from_config(config.cost),
        parallelism if parallelism is not None else config.parallelism,
    )
    return BuildResult(
        project_root=root,
        collection=collection,
        graph_result=graph_result,
        plan=plan,
        duration_seconds=time.perf_counter() - started_at,
    )


def build_cache(
    project_root: Path,
    output: Path,
    config: UefastConfig,
    *,
    force: bool = False,
    workers: int | None = None,
    parallelism: int | None = None,
) -> CacheBuildOutcome:
    """Run the full build and write the cache, unless an identical valid one is already present.

    A cache whose hashes still match is rewritten when its graph or load plan
    differs from the fresh build, e.g. after ``parallelism`` or cost settings
    change.
    """
    root = project_root.resolve()
    collection = collect_assets(root, config, workers=workers)
    result = analyze_project(root, config, parallelism=parallelism, collection=collection)
    contents = result.cache_contents()

    previous: CacheVerdict | None = None
    if output.exists():
        previous = validate_cache(output, collection.hash_table())
        if previous.valid and not force:
            if _cache_bytes_match(output, encode_cache(contents)):
                logger.info("Cache at %s is up to date; use --force to rebuild", output)
                return CacheBuildOutcome(
                    path=output,
                    written=False,
                    size_bytes=output.stat().st_size,
                    previous=previous,
                )
            logger.info("Rebuilding cache at %s (graph or load plan changed)", output)
        else:
            logger.info("Rebuilding cache at %s (%s)", output, previous.reason.value)

    size_bytes = write_cache(output, contents)
    return CacheBuildOutcome(path=output, written=True, size_bytes=size_bytes, previous=previous, result=result)


def _cache_bytes_match(path: Path, expected: bytes) -> bool:
    try:
        return path.read_bytes() == expected
    except OSError:
        return False
