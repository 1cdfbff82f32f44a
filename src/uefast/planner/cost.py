"""Per-asset load cost model."""

from __future__ import annotations

from dataclasses import dataclass

from uefast.config import CostConfig
from uefast.model import AssetRecord

BYTES_PER_MEGABYTE: int = 1024 * 1024


@dataclass(frozen=True)
class CostModel:
    """Estimated load seconds: fixed overhead plus a size-proportional term."""

    per_asset_overhead_seconds: float
    seconds_per_megabyte: float

    @classmethod
    def from_config(cls, config: CostConfig) -> CostModel:
        return cls(
            per_asset_overhead_seconds=config.per_asset_overhead_seconds,
            seconds_per_megabyte=config.seconds_per_megabyte,
        )

    def cost(self, record: AssetRecord) -> float:
        return self.cost_for_size(record.size_bytes)

    def cost_for_size(self, size_bytes: int) -> float:
        return self.per_asset_overhead_seconds + (size_bytes / BYTES_PER_MEGABYTE) * self.seconds_per_megabyte
