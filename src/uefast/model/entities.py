"""Domain entities shared by the collector, graph builder, planner, and cache codec."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from uefast.types import AssetKind, EdgeKind


@dataclass(frozen=True)
class AssetRecord:
    """Metadata for one collected asset."""

    asset_id: str
    path: str
    kind: AssetKind
    content_hash: int
    size_bytes: int
    hard_dependencies: tuple[str, ...] = ()
    soft_dependencies: tuple[str, ...] = ()
    startup_critical: bool = False

    @property
    def hash_hex(self) -> str:
        """Content hash rendered as fixed-width hex."""
        return f"{self.content_hash:016x}"


@dataclass(frozen=True, order=True)
class DependencyEdge:
    """Directed reference: ``source`` depends on ``target``."""

    source: str
    target: str
    kind: EdgeKind


@dataclass(frozen=True)
class DemotedEdge:
    """A hard edge demoted to soft because it closed a dependency cycle."""

    source: str
    target: str
    cycle: tuple[str, ...]

    def describe(self) -> str:
        """Render the cycle as ``A -> B -> ... -> A``."""
        return " -> ".join((*self.cycle, self.cycle[0]))


@dataclass(frozen=True)
class DependencyGraph:
    """Collected assets plus tagged dependency edges."""

    assets: dict[str, AssetRecord] = field(default_factory=dict)
    edges: tuple[DependencyEdge, ...] = ()

    @classmethod
    def from_parts(cls, records: Iterable[AssetRecord], edges: Iterable[DependencyEdge]) -> DependencyGraph:
        """Build a graph with assets keyed and edges sorted deterministically."""
        assets = {record.asset_id: record for record in sorted(records, key=lambda record: record.asset_id)}
        return cls(assets=assets, edges=tuple(sorted(set(edges))))

    def asset_ids(self) -> tuple[str, ...]:
        return tuple(sorted(self.assets))

    def hard_edges(self) -> tuple[DependencyEdge, ...]:
        return tuple(edge for edge in self.edges if edge.kind == "hard")

    def soft_edges(self) -> tuple[DependencyEdge, ...]:
        return tuple(edge for edge in self.edges if edge.kind == "soft")

    def hard_dependencies(self, asset_id: str) -> tuple[str, ...]:
        """Return sorted hard dependency IDs for *asset_id* according to graph edges."""
        return tuple(sorted(edge.target for edge in self.edges if edge.kind == "hard" and edge.source == asset_id))

    def hard_adjacency(self) -> dict[str, list[str]]:
        """Map every asset ID to its sorted hard dependency IDs."""
        adjacency: dict[str, list[str]] = {asset_id: [] for asset_id in self.asset_ids()}
        for edge in self.edges:
            if edge.kind == "hard":
                adjacency[edge.source].append(edge.target)
        for targets in adjacency.values():
            targets.sort()
        return adjacency


@dataclass(frozen=True)
class LoadBatch:
    """Assets loaded in parallel within one topological layer."""

    index: int
    layer: int
    assets: tuple[str, ...]
    estimated_seconds: float


@dataclass(frozen=True)
class LoadPlan:
    """Ordered parallel load batches plus latency estimates."""

    batches: tuple[LoadBatch, ...]
    parallelism: int
    estimated_total_seconds: float
    serial_baseline_seconds: float

    @property
    def estimated_savings_seconds(self) -> float:
        return self.serial_baseline_seconds - self.estimated_total_seconds

    @property
    def layer_count(self) -> int:
        return len({batch.layer for batch in self.batches})

    def batch_index_of(self, asset_id: str) -> int:
        """Return the batch index holding *asset_id*."""
        for batch in self.batches:
            if asset_id in batch.assets:
                return batch.index
        raise KeyError(asset_id)

    def batch_indices(self) -> dict[str, int]:
        return {asset_id: batch.index for batch in self.batches for asset_id in batch.assets}

    def load_order(self) -> tuple[str, ...]:
        """Flatten batches into a single load sequence."""
        return tuple(asset_id for batch in self.batches for asset_id in batch.assets)


@dataclass(frozen=True)
class CacheHeader:
    """Fixed-size header preceding the cache body."""

    magic: bytes
    version: int
    checksum: int
    body_length: int


@dataclass(frozen=True)
class CacheContents:
    """Everything persisted in a startup cache body."""

    graph: DependencyGraph
    plan: LoadPlan
    hash_table: dict[str, int]

    @classmethod
    def from_build(cls, graph: DependencyGraph, plan: LoadPlan) -> CacheContents:
        """Derive the hash table from the graph's records."""
        return cls(graph=graph, plan=plan, hash_table=hash_table_from(graph.assets.values()))


@dataclass(frozen=True)
class CollectionResult:
    """Collector output: usable records plus per-asset problems."""

    records: tuple[AssetRecord, ...]
    warnings: tuple[str, ...] = ()
    skipped: tuple[str, ...] = ()
    startup_roots: tuple[str, ...] = ()

    def hash_table(self) -> dict[str, int]:
        return hash_table_from(self.records)


@dataclass(frozen=True)
class GraphBuildResult:
    """Graph builder output: acyclic graph plus cycle diagnostics."""

    graph: DependencyGraph
    demoted_edges: tuple[DemotedEdge, ...] = ()
    warnings: tuple[str, ...] = ()


def hash_table_from(records: Iterable[AssetRecord]) -> dict[str, int]:
    """Return an ID-sorted mapping of asset ID to content hash."""
    return {record.asset_id: record.content_hash for record in sorted(records, key=lambda record: record.asset_id)}


def diff_hash_tables(
    expected: Mapping[str, int],
    actual: Mapping[str, int],
) -> tuple[tuple[str, ...], tuple[str, ...], tuple[str, ...]]:
    """Return ``(added, removed, changed)`` asset IDs going from *expected* to *actual*."""
    added = tuple(sorted(set(actual) - set(expected)))
    removed = tuple(sorted(set(expected) - set(actual)))
    changed = tuple(sorted(key for key in set(expected) & set(actual) if expected[key] != actual[key]))
    return added, removed, changed
