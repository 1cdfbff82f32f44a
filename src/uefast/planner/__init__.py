"""Load-order planning: topological layering and parallel batch packing."""

from __future__ import annotations

from .cost import CostModel
from .optimizer import optimize_load_order, partition_layer, topological_layers, topological_order

__all__ = ["CostModel", "optimize_load_order", "partition_layer", "topological_layers", "topological_order"]
