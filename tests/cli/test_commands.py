"""Tests for CLI parser and command behavior."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from uefast.cli.main import build_parser, main
from uefast.exceptions import ConfigError


def test_build_parser_accepts_analyze_flags(tmp_path: Path) -> None:
    parser = build_parser()

    args = parser.parse_args(
        ["analyze", "--project", str(tmp_path), "--output", str(tmp_path / "r.json"), "-P", "3", "-j", "2", "-v"]
    )

    assert args.command == "analyze"
    assert args.project == tmp_path
    assert args.output == tmp_path / "r.json"
    assert args.parallelism == 3
    assert args.workers == 2
    assert args.verbose is True


def test_build_parser_cache_output_optional(tmp_path: Path) -> None:
    args = build_parser().parse_args(["cache", "--project", str(tmp_path)])

    assert args.output is None
    assert args.force is False


def test_build_parser_requires_project(tmp_path: Path) -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args(["verify"])


def test_analyze_writes_report(sample_project: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    output = tmp_path / "analysis.json"

    exit_code = main(["analyze", "--project", str(sample_project), "--output", str(output)])

    assert exit_code == 0
    report = json.loads(output.read_text(encoding="utf-8"))
    assert report["totalAssets"] == 4
    assert report["startupAssets"] == 3
    assert "estimatedSavingsSeconds" in report
    assert "Report written to" in capsys.readouterr().out


def test_analyze_missing_project_exits_nonzero(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main(["analyze", "--project", str(tmp_path / "missing"), "--output", str(tmp_path / "r.json")])

    assert exit_code == 1
    assert "does not exist" in capsys.readouterr().err
    assert not (tmp_path / "r.json").exists()


def test_analyze_config_error_exits_two(sample_project: Path, tmp_path: Path) -> None:
    (sample_project / "uefast.yaml").write_text("parallelism: 0\n", encoding="utf-8")

    exit_code = main(["analyze", "--project", str(sample_project), "--output", str(tmp_path / "r.json")])

    assert exit_code == 2


def test_cache_then_verify_valid(sample_project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["cache", "--project", str(sample_project)]) == 0
    assert (sample_project / "Saved" / "FastStartup" / "startup.uefast").is_file()
    capsys.readouterr()

    exit_code = main(["verify", "--project", str(sample_project), "--json"])

    verdict = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert verdict["valid"] is True
    assert verdict["reason"] == "valid"


def test_cache_skips_when_up_to_date(sample_project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    main(["cache", "--project", str(sample_project)])
    capsys.readouterr()

    assert main(["cache", "--project", str(sample_project)]) == 0
    assert "up to date" in capsys.readouterr().out


def test_verify_missing_cache_exits_one(sample_project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main(["verify", "--project", str(sample_project)])

    assert exit_code == 1
    assert "missing" in capsys.readouterr().out


def test_verify_reports_stale_assets(sample_project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    main(["cache", "--project", str(sample_project)])
    font = sample_project / "Content" / "UI" / "Font.uasset"
    font.write_bytes(font.read_bytes() + b"\x00")
    capsys.readouterr()

    exit_code = main(["verify", "--project", str(sample_project)])

    out = capsys.readouterr().out
    assert exit_code == 1
    assert "stale" in out
    assert "/Game/UI/Font" in out


def test_scan_filter_prints_maps(sample_project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main(["scan", "--project", str(sample_project), "--filter", "umap"])

    assets = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert [asset["id"] for asset in assets] == ["/Game/Maps/Entry"]


def test_graph_writes_dot(sample_project: Path, tmp_path: Path) -> None:
    output = tmp_path / "graph.dot"

    assert main(["graph", "--project", str(sample_project), "--output", str(output), "--startup-only"]) == 0
    assert output.read_text(encoding="utf-8").startswith("digraph uefast {")


def test_stats_reads_cache(sample_project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    main(["cache", "--project", str(sample_project)])
    capsys.readouterr()

    exit_code = main(["stats", "--cache", str(sample_project / "Saved" / "FastStartup" / "startup.uefast")])

    stats = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert stats["assetCount"] == 4
    assert stats["version"] == 1


def test_stats_rejects_foreign_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "bogus.uefast"
    path.write_bytes(b"not a cache at all")

    assert main(["stats", "--cache", str(path)]) == 1
    assert "magic" in capsys.readouterr().err


def test_main_maps_config_error_from_pipeline(sample_project: Path, tmp_path: Path) -> None:
    with patch("uefast.cli.main.analyze_project", side_effect=ConfigError("bad parallelism")):
        exit_code = main(["analyze", "--project", str(sample_project), "--output", str(tmp_path / "r.json")])

    assert exit_code == 2


@pytest.mark.parametrize(
    ("extra_args", "expected_message"),
    [(["-j", "-1"], "--workers"), (["-P", "0"], "--parallelism")],
    ids=["negative_workers", "zero_parallelism"],
)
def test_analyze_rejects_invalid_numeric_flags(
    sample_project: Path,
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
    extra_args: list[str],
    expected_message: str,
) -> None:
    output = tmp_path / "r.json"

    exit_code = main(["analyze", "--project", str(sample_project), "--output", str(output), *extra_args])

    assert exit_code == 2
    assert expected_message in capsys.readouterr().err
    assert not output.exists()


def test_cache_rejects_negative_workers(sample_project: Path) -> None:
    assert main(["cache", "--project", str(sample_project), "-j", "-1"]) == 2
    assert not (sample_project / "Saved").exists()
