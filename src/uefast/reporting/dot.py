"""Graphviz DOT export of the dependency graph."""

from __future__ import annotations

from uefast.constants.reporting import DOT_GRAPH_NAME
from uefast.model import DependencyGraph, LoadPlan


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def render_dot(graph: DependencyGraph, *, plan: LoadPlan | None = None, startup_only: bool = False) -> str:
    """Render *graph* as DOT text.

    Hard edges are solid and soft edges dashed. Startup-critical assets are
    filled; with a *plan*, each node label carries its batch index. With
    *startup_only*, only startup-critical assets and edges between them are
    emitted.
    """
    selected = [
        asset_id
        for asset_id in graph.asset_ids()
        if not startup_only or graph.assets[asset_id].startup_critical
    ]
    included = set(selected)
    batch_of = plan.batch_indices() if plan is not None else {}

    lines = [f"digraph {DOT_GRAPH_NAME} {{", "  rankdir=LR;", "  node [shape=box];"]
    for asset_id in selected:
        record = graph.assets[asset_id]
        attributes = []
        if asset_id in batch_of:
            label = _quote(asset_id)[:-1] + "\\n#" + str(batch_of[asset_id]) + '"'
            attributes.append(f"label={label}")
        if record.startup_critical:
            attributes.append('style=filled fillcolor="#ffe0b2"')
        if record.kind == "map":
            attributes.append("shape=folder")
        suffix = f" [{' '.join(attributes)}]" if attributes else ""
        lines.append(f"  {_quote(asset_id)}{suffix};")

    for edge in sorted(graph.edges):
        if edge.source not in included or edge.target not in included:
            continue
        style = " [style=dashed]" if edge.kind == "soft" else ""
        lines.append(f"  {_quote(edge.source)} -> {_quote(edge.target)}{style};")
    lines.append("}")
    return "\n".join(lines) + "\n"
