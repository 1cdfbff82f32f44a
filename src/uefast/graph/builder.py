"""Dependency graph builder.

Hard-reference cycles cannot occur in a healthy project, so a cycle is
treated as bad metadata: the edge that closes it is demoted to a soft
reference and the build carries on.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import replace

from uefast.model import AssetRecord, DemotedEdge, DependencyEdge, DependencyGraph, GraphBuildResult

logger = logging.getLogger(__name__)

_UNVISITED = 0
_ON_STACK = 1
_DONE = 2


def build_graph(records: Iterable[AssetRecord], startup_roots: Iterable[str] | None = None) -> GraphBuildResult:
    """Assemble an acyclic hard-dependency graph from collected records.

    When *startup_roots* is given, ``startup_critical`` is recomputed over the
    final hard edges, so an asset only reachable through a demoted edge loses
    the flag. Without roots the records' flags are kept as collected.
    """
    by_id = {record.asset_id: record for record in records}
    adjacency: dict[str, list[str]] = {}
    for asset_id in sorted(by_id):
        record = by_id[asset_id]
        targets = []
        for dependency in record.hard_dependencies:
            if dependency in by_id and dependency != asset_id:
                targets.append(dependency)
            else:
                logger.debug("Ignoring hard reference to unknown asset %s -> %s", asset_id, dependency)
        adjacency[asset_id] = sorted(set(targets))

    demoted = find_hard_cycle_edges(adjacency)
    demoted_targets: dict[str, set[str]] = {}
    for edge in demoted:
        demoted_targets.setdefault(edge.source, set()).add(edge.target)
    warnings: list[str] = []
    for edge in demoted:
        warning = f"Hard dependency cycle {edge.describe()}; demoted {edge.source} -> {edge.target} to soft"
        logger.warning(warning)
        warnings.append(warning)

    hard_by_id: dict[str, tuple[str, ...]] = {}
    soft_by_id: dict[str, tuple[str, ...]] = {}
    for asset_id in sorted(by_id):
        cut = demoted_targets.get(asset_id, set())
        hard = tuple(target for target in adjacency[asset_id] if target not in cut)
        soft = tuple(
            sorted(
                {
                    target
                    for target in (*by_id[asset_id].soft_dependencies, *cut)
                    if target in by_id and target != asset_id and target not in hard
                }
            )
        )
        hard_by_id[asset_id] = hard
        soft_by_id[asset_id] = soft

    critical = None
    if startup_roots is not None:
        critical = reachable_from([root for root in startup_roots if root in by_id], hard_by_id)

    edges: list[DependencyEdge] = []
    resolved: list[AssetRecord] = []
    for asset_id in sorted(by_id):
        record = by_id[asset_id]
        hard = hard_by_id[asset_id]
        soft = soft_by_id[asset_id]
        startup_critical = record.startup_critical if critical is None else asset_id in critical
        edges.extend(DependencyEdge(asset_id, target, "hard") for target in hard)
        edges.extend(DependencyEdge(asset_id, target, "soft") for target in soft)
        if (
            hard != record.hard_dependencies
            or soft != record.soft_dependencies
            or startup_critical != record.startup_critical
        ):
            record = replace(
                record,
                hard_dependencies=hard,
                soft_dependencies=soft,
                startup_critical=startup_critical,
            )
        resolved.append(record)

    graph = DependencyGraph.from_parts(resolved, edges)
    logger.info(
        "Built dependency graph: %d assets, %d hard edges, %d soft edges, %d demoted",
        len(graph.assets),
        len(graph.hard_edges()),
        len(graph.soft_edges()),
        len(demoted),
    )
    return GraphBuildResult(graph=graph, demoted_edges=tuple(demoted), warnings=tuple(warnings))


def find_hard_cycle_edges(adjacency: dict[str, list[str]]) -> list[DemotedEdge]:
    """Return the back edges of a depth-first traversal, one per cycle it closes.

    Traversal starts from asset IDs in sorted order and visits neighbours in
    sorted order, so the chosen edges are deterministic. Removing every
    returned edge leaves the graph acyclic.
    """
    state = dict.fromkeys(adjacency, _UNVISITED)
    found: list[DemotedEdge] = []

    for start in sorted(adjacency):
        if state[start] != _UNVISITED:
            continue
        path: list[str] = [start]
        stack: list[tuple[str, int]] = [(start, 0)]
        state[start] = _ON_STACK
        while stack:
            node, next_index = stack[-1]
            neighbours = adjacency[node]
            if next_index >= len(neighbours):
                stack.pop()
                path.pop()
                state[node] = _DONE
                continue
            stack[-1] = (node, next_index + 1)
            target = neighbours[next_index]
            target_state = state.get(target, _DONE)
            if target_state == _ON_STACK:
                cycle = tuple(path[path.index(target) :])
                found.append(DemotedEdge(source=node, target=target, cycle=cycle))
            elif target_state == _UNVISITED:
                state[target] = _ON_STACK
                path.append(target)
                stack.append((target, 0))

    return found


def reachable_from(roots: Sequence[str], hard_by_id: Mapping[str, Sequence[str]]) -> set[str]:
    """Return every asset reachable from *roots* through hard references, roots included."""
    seen: set[str] = set(roots)
    queue = deque(roots)
    while queue:
        current = queue.popleft()
        for dependency in hard_by_id.get(current, ()):
            if dependency not in seen:
                seen.add(dependency)
                queue.append(dependency)
    return seen
