"""Core data models for uefast."""

from .entities import (
    AssetRecord,
    CacheContents,
    CacheHeader,
    CollectionResult,
    DemotedEdge,
    DependencyEdge,
    DependencyGraph,
    GraphBuildResult,
    LoadBatch,
    LoadPlan,
    diff_hash_tables,
    hash_table_from,
)

__all__ = [
    "AssetRecord",
    "CacheContents",
    "CacheHeader",
    "CollectionResult",
    "DemotedEdge",
    "DependencyEdge",
    "DependencyGraph",
    "GraphBuildResult",
    "LoadBatch",
    "LoadPlan",
    "diff_hash_tables",
    "hash_table_from",
]
