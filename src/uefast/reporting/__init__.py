"""Report generation for build, scan, and cache inspection results."""

from __future__ import annotations

from .analysis import (
    asset_to_dict,
    build_analysis_report,
    build_asset_list,
    build_cache_stats,
    find_duplicates,
    generate_recommendations,
    report_type_for,
    type_statistics,
    write_report,
)
from .dot import render_dot
from .stdout import BuildSummaryReporter, render_verdict

__all__ = [
    "BuildSummaryReporter",
    "asset_to_dict",
    "build_analysis_report",
    "build_asset_list",
    "build_cache_stats",
    "find_duplicates",
    "generate_recommendations",
    "render_dot",
    "render_verdict",
    "report_type_for",
    "type_statistics",
    "write_report",
]
