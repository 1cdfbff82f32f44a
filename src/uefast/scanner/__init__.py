"""Asset metadata collection package."""

from __future__ import annotations

from .collector import collect_assets, read_reference_table
from .discovery import asset_id_for, discover_asset_files

__all__ = ["asset_id_for", "collect_assets", "discover_asset_files", "read_reference_table"]
