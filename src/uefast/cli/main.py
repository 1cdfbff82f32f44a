"""CLI entrypoint for the uefast startup cache builder."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from uefast import __version__
from uefast.cache import default_cache_path, inspect_cache, verify_project_cache
from uefast.config import UefastConfig, load_config
from uefast.constants.branding import CLI_DESCRIPTION
from uefast.exceptions import ConfigError, UefastError
from uefast.pipeline import analyze_project, build_cache
from uefast.reporting import (
    BuildSummaryReporter,
    build_analysis_report,
    build_asset_list,
    build_cache_stats,
    render_dot,
    render_verdict,
    write_report,
)
from uefast.scanner import collect_assets


def _add_common_flags(command: argparse.ArgumentParser) -> None:
    command.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    command.add_argument(
        "-j",
        "--workers",
        type=int,
        default=None,
        help="Collector worker count (0 or omitted = auto)",
    )
    command.add_argument("-c", "--config", type=Path, default=None, help="Explicit config file")


def _add_project(command: argparse.ArgumentParser) -> None:
    command.add_argument("-p", "--project", type=Path, required=True, help="Project root path")


def build_parser() -> argparse.ArgumentParser:
    """Build top-level CLI parser."""
    parser = argparse.ArgumentParser(
        prog="uefast",
        description=CLI_DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze = subparsers.add_parser("analyze", help="Analyze the project and write a JSON report")
    _add_project(analyze)
    analyze.add_argument("-o", "--output", type=Path, required=True, help="Report output path")
    analyze.add_argument("-P", "--parallelism", type=int, default=None, help="Parallel load slots per layer")
    _add_common_flags(analyze)

    cache = subparsers.add_parser("cache", help="Build the binary startup cache")
    _add_project(cache)
    cache.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Cache output path (default: <project>/Saved/FastStartup/startup.uefast)",
    )
    cache.add_argument("-f", "--force", action="store_true", help="Rebuild even if the existing cache is valid")
    cache.add_argument("-P", "--parallelism", type=int, default=None, help="Parallel load slots per layer")
    _add_common_flags(cache)

    verify = subparsers.add_parser("verify", help="Check whether the startup cache is still valid")
    _add_project(verify)
    verify.add_argument("--cache", type=Path, default=None, help="Cache file path (default: project cache)")
    verify.add_argument("--json", action="store_true", help="Print the verdict as JSON")
    _add_common_flags(verify)

    scan = subparsers.add_parser("scan", help="List collected assets as JSON")
    _add_project(scan)
    scan.add_argument("-o", "--output", type=Path, default=None, help="Write JSON here instead of stdout")
    scan.add_argument("--filter", dest="extension", default=None, help="Only list assets with this extension")
    _add_common_flags(scan)

    graph = subparsers.add_parser("graph", help="Export the dependency graph as DOT")
    _add_project(graph)
    graph.add_argument("-o", "--output", type=Path, default=None, help="Write DOT here instead of stdout")
    graph.add_argument("--startup-only", action="store_true", help="Only include startup-critical assets")
    _add_common_flags(graph)

    stats = subparsers.add_parser("stats", help="Show statistics for an existing cache file")
    stats.add_argument("--cache", type=Path, required=True, help="Cache file path")
    _add_common_flags(stats)

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(message)s",
    )

    if args.workers is not None and args.workers < 0:
        print(f"Configuration error: --workers must be >= 0, got {args.workers}", file=sys.stderr)
        return 2
    parallelism = getattr(args, "parallelism", None)
    if parallelism is not None and parallelism < 1:
        print(f"Configuration error: --parallelism must be >= 1, got {parallelism}", file=sys.stderr)
        return 2

    handlers = {
        "analyze": _handle_analyze,
        "cache": _handle_cache,
        "verify": _handle_verify,
        "scan": _handle_scan,
        "graph": _handle_graph,
        "stats": _handle_stats,
    }
    handler = handlers.get(args.command)
    if handler is None:
        parser.error(f"Unsupported command: {args.command}")

    try:
        return handler(args)
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2
    except UefastError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


def _load_config(args: argparse.Namespace) -> UefastConfig:
    return load_config(args.project, args.config)


def _handle_analyze(args: argparse.Namespace) -> int:
    config = _load_config(args)
    result = analyze_project(args.project, config, workers=args.workers, parallelism=args.parallelism)
    write_report(args.output, build_analysis_report(result, config))
    print(BuildSummaryReporter(result, verbose=args.verbose).render())
    print(f"\n  Report written to {args.output}")
    return 0


def _handle_cache(args: argparse.Namespace) -> int:
    config = _load_config(args)
    output = args.output if args.output is not None else default_cache_path(args.project)
    outcome = build_cache(
        args.project,
        output,
        config,
        force=args.force,
        workers=args.workers,
        parallelism=args.parallelism,
    )
    if not outcome.written:
        print(f"Cache is up to date: {outcome.path} ({outcome.size_bytes} bytes)")
        return 0
    if outcome.result is not None:
        print(BuildSummaryReporter(outcome.result, verbose=args.verbose).render())
    print(f"\n  Cache written to {outcome.path} ({outcome.size_bytes} bytes)")
    return 0


def _handle_verify(args: argparse.Namespace) -> int:
    config = _load_config(args)
    cache_path = args.cache if args.cache is not None else default_cache_path(args.project)
    verdict = verify_project_cache(cache_path, args.project, config, workers=args.workers)
    if args.json:
        print(json.dumps(verdict.to_dict(), indent=2, sort_keys=True))
    else:
        print(render_verdict(verdict))
    return 0 if verdict.valid else 1


def _handle_scan(args: argparse.Namespace) -> int:
    config = _load_config(args)
    collection = collect_assets(args.project.resolve(), config, workers=args.workers)
    assets = build_asset_list(collection.records, args.extension)
    if args.output is not None:
        write_report(args.output, assets)
        print(f"{len(assets)} assets written to {args.output}")
    else:
        print(json.dumps(assets, indent=2, sort_keys=True))
    return 0


def _handle_graph(args: argparse.Namespace) -> int:
    config = _load_config(args)
    result = analyze_project(args.project, config, workers=args.workers)
    dot = render_dot(result.graph_result.graph, plan=result.plan, startup_only=args.startup_only)
    if args.output is None:
        sys.stdout.write(dot)
        return 0
    try:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(dot, encoding="utf-8")
    except OSError as exc:
        print(f"Error: cannot write {args.output}: {exc}", file=sys.stderr)
        return 1
    print(f"Graph written to {args.output}")
    return 0


def _handle_stats(args: argparse.Namespace) -> int:
    header, contents, size_bytes = inspect_cache(args.cache)
    print(json.dumps(build_cache_stats(header, contents, size_bytes), indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
