"""Human-readable stdout summaries."""

from __future__ import annotations

from uefast.cache import CacheVerdict
from uefast.constants.branding import ASCII_LOGO_LINES
from uefast.constants.reporting import VERIFY_DIFF_PREVIEW_LIMIT
from uefast.pipeline import BuildResult


def _format_bytes(size: int) -> str:
    value = float(size)
    for unit in ("B", "KiB", "MiB"):
        if value < 1024:
            return f"{value:.0f} {unit}" if unit == "B" else f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} GiB"


class BuildSummaryReporter:
    """Formats a build result as a short terminal summary."""

    def __init__(self, result: BuildResult, *, verbose: bool = False) -> None:
        self._result = result
        self._verbose = verbose

    def render(self) -> str:
        r = self._result
        graph = r.graph_result.graph
        plan = r.plan
        startup = [record for record in graph.assets.values() if record.startup_critical]
        sep = "  " + "─" * 38

        lines = [
            "",
            f"  {ASCII_LOGO_LINES[0]}",
            sep,
            f"  Assets      {len(graph.assets)} total / {len(startup)} startup / {len(r.collection.skipped)} skipped",
            f"  Size        {_format_bytes(sum(record.size_bytes for record in graph.assets.values()))}",
            f"  Edges       {len(graph.hard_edges())} hard / {len(graph.soft_edges())} soft",
            f"  Plan        {len(plan.batches)} batches / {plan.layer_count} layers / P={plan.parallelism}",
            (
                f"  Estimate    {plan.estimated_total_seconds:.3f}s "
                f"(serial {plan.serial_baseline_seconds:.3f}s, saves {plan.estimated_savings_seconds:.3f}s)"
            ),
            f"  Duration    {r.duration_seconds:.2f}s",
        ]
        if r.graph_result.demoted_edges:
            lines.append(f"  Demoted     {len(r.graph_result.demoted_edges)} cyclic hard edges")
        if self._verbose and r.warnings:
            lines.append("")
            lines.extend(f"  ! {warning}" for warning in r.warnings)
        return "\n".join(lines)


def render_verdict(verdict: CacheVerdict) -> str:
    """One status line plus a preview of changed asset IDs."""
    status = "VALID" if verdict.valid else "INVALID"
    lines = [f"{status} ({verdict.reason.value}): {verdict.detail}"]
    for label, ids in (("added", verdict.added), ("removed", verdict.removed), ("changed", verdict.changed)):
        for asset_id in ids[:VERIFY_DIFF_PREVIEW_LIMIT]:
            lines.append(f"  {label:<8}{asset_id}")
        if len(ids) > VERIFY_DIFF_PREVIEW_LIMIT:
            lines.append(f"  {label:<8}... {len(ids) - VERIFY_DIFF_PREVIEW_LIMIT} more")
    return "\n".join(lines)
