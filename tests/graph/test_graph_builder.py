"""Tests for dependency graph construction and cycle demotion."""

from __future__ import annotations

import logging
from dataclasses import replace

import pytest

from uefast.graph import build_graph, find_hard_cycle_edges
from uefast.model import AssetRecord, DependencyEdge
from uefast.planner import topological_order


def _record(asset_id: str, hard: tuple[str, ...] = (), soft: tuple[str, ...] = ()) -> AssetRecord:
    return AssetRecord(
        asset_id=asset_id,
        path=f"Content{asset_id[5:]}.uasset",
        kind="package",
        content_hash=len(asset_id),
        size_bytes=100,
        hard_dependencies=hard,
        soft_dependencies=soft,
    )


def test_build_graph_tags_hard_and_soft_edges() -> None:
    result = build_graph(
        [
            _record("/Game/A", hard=("/Game/B",), soft=("/Game/C",)),
            _record("/Game/B"),
            _record("/Game/C"),
        ]
    )

    assert result.graph.edges == (
        DependencyEdge("/Game/A", "/Game/B", "hard"),
        DependencyEdge("/Game/A", "/Game/C", "soft"),
    )
    assert result.demoted_edges == ()
    assert result.warnings == ()


def test_build_graph_demotes_exactly_one_edge_of_a_three_cycle(caplog: pytest.LogCaptureFixture) -> None:
    records = [
        _record("/Game/A", hard=("/Game/B",)),
        _record("/Game/B", hard=("/Game/C",)),
        _record("/Game/C", hard=("/Game/A",)),
    ]

    with caplog.at_level(logging.WARNING):
        result = build_graph(records)

    assert len(result.demoted_edges) == 1
    demoted = result.demoted_edges[0]
    assert (demoted.source, demoted.target) == ("/Game/C", "/Game/A")
    assert demoted.cycle == ("/Game/A", "/Game/B", "/Game/C")
    assert result.graph.assets["/Game/C"].hard_dependencies == ()
    assert result.graph.assets["/Game/C"].soft_dependencies == ("/Game/A",)
    assert DependencyEdge("/Game/C", "/Game/A", "soft") in result.graph.edges
    assert "/Game/A -> /Game/B -> /Game/C -> /Game/A" in result.warnings[0]
    assert "demoted /Game/C -> /Game/A" in caplog.text


def test_build_graph_result_is_acyclic_after_demotion() -> None:
    records = [
        _record("/Game/A", hard=("/Game/B", "/Game/D")),
        _record("/Game/B", hard=("/Game/A",)),
        _record("/Game/D", hard=("/Game/E",)),
        _record("/Game/E", hard=("/Game/D",)),
    ]

    result = build_graph(records)

    assert len(result.demoted_edges) == 2
    assert len(topological_order(result.graph)) == 4


def test_build_graph_ignores_unknown_and_self_references() -> None:
    result = build_graph([_record("/Game/A", hard=("/Game/A", "/Game/Missing"), soft=("/Game/Gone",))])

    assert result.graph.edges == ()
    assert result.graph.assets["/Game/A"].hard_dependencies == ()


def test_find_hard_cycle_edges_on_acyclic_graph() -> None:
    assert find_hard_cycle_edges({"a": ["b"], "b": ["c"], "c": []}) == []


def test_find_hard_cycle_edges_is_deterministic() -> None:
    adjacency = {"a": ["b"], "b": ["a", "c"], "c": ["b"]}

    first = find_hard_cycle_edges(adjacency)
    second = find_hard_cycle_edges(dict(reversed(list(adjacency.items()))))

    assert first == second
    assert [(edge.source, edge.target) for edge in first] == [("b", "a"), ("c", "b")]


def test_build_graph_recomputes_startup_flags_after_demotion() -> None:
    records = [
        replace(_record("/Game/A", hard=("/Game/B",)), startup_critical=True),
        replace(_record("/Game/B", hard=("/Game/A",)), startup_critical=True),
        replace(_record("/Game/Startup", hard=("/Game/B",)), startup_critical=True),
    ]

    result = build_graph(records, startup_roots=["/Game/Startup"])

    assert [(edge.source, edge.target) for edge in result.demoted_edges] == [("/Game/B", "/Game/A")]
    assert [(edge.source, edge.target) for edge in result.graph.hard_edges()] == [
        ("/Game/A", "/Game/B"),
        ("/Game/Startup", "/Game/B"),
    ]
    assert not result.graph.assets["/Game/A"].startup_critical
    assert result.graph.assets["/Game/B"].startup_critical
    assert result.graph.assets["/Game/Startup"].startup_critical


def test_build_graph_keeps_collected_flags_without_roots() -> None:
    records = [replace(_record("/Game/A"), startup_critical=True), _record("/Game/B")]

    result = build_graph(records)

    assert result.graph.assets["/Game/A"].startup_critical
    assert not result.graph.assets["/Game/B"].startup_critical
