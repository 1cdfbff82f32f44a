"""Dependency graph construction and cycle resolution."""

from __future__ import annotations

from .builder import build_graph, find_hard_cycle_edges, reachable_from

__all__ = ["build_graph", "find_hard_cycle_edges", "reachable_from"]
