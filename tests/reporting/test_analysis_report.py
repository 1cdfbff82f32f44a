"""Tests for the analysis report, its JSON Schema, and DOT export."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import jsonschema
import pytest

from uefast.config import UefastConfig
from uefast.constants.reporting import SCHEMA_VERSION
from uefast.exceptions import ProjectIOError
from uefast.model import AssetRecord
from uefast.pipeline import analyze_project
from uefast.reporting import (
    build_analysis_report,
    build_asset_list,
    find_duplicates,
    generate_recommendations,
    render_dot,
    report_type_for,
    write_report,
)

SCHEMAS_DIR: Path = Path(__file__).resolve().parents[2] / "schemas"
ANALYSIS_SCHEMA_PATH: Path = SCHEMAS_DIR / "analysis.schema.json"

AssetWriter = Callable[..., Path]


@pytest.fixture()
def analysis_schema() -> dict[str, Any]:
    """Load the analysis report JSON Schema."""
    return json.loads(ANALYSIS_SCHEMA_PATH.read_text(encoding="utf-8"))


def test_analysis_report_matches_schema(sample_project: Path, analysis_schema: dict[str, Any]) -> None:
    report = build_analysis_report(analyze_project(sample_project, UefastConfig()), UefastConfig())

    validator = jsonschema.Draft202012Validator(analysis_schema)
    errors = sorted(validator.iter_errors(report), key=lambda error: list(error.path))

    assert errors == []
    assert report["schemaVersion"] == SCHEMA_VERSION


def test_analysis_report_counts(sample_project: Path) -> None:
    report = build_analysis_report(analyze_project(sample_project, UefastConfig()), UefastConfig())

    assert report["projectName"] == "Demo"
    assert report["totalAssets"] == 4
    assert report["startupAssets"] == 3
    assert report["dependencyCount"] == 2
    assert report["softDependencyCount"] == 1
    assert [asset["id"] for asset in report["assets"]] == [
        "/Game/Maps/Entry",
        "/Game/Props/Barrel",
        "/Game/UI/Font",
        "/Game/UI/MainMenu",
    ]
    assert report["estimatedSavingsSeconds"] >= 0


def test_write_report_is_atomic_json(tmp_path: Path, sample_project: Path) -> None:
    output = tmp_path / "reports" / "analysis.json"
    report = build_analysis_report(analyze_project(sample_project, UefastConfig()), UefastConfig())

    write_report(output, report)

    assert json.loads(output.read_text(encoding="utf-8")) == report
    assert [item.name for item in output.parent.iterdir()] == ["analysis.json"]


def test_find_duplicates_groups_identical_content() -> None:
    records = [
        AssetRecord("/Game/A", "Content/A.uasset", "package", 7, 100),
        AssetRecord("/Game/B", "Content/B.uasset", "package", 7, 100),
        AssetRecord("/Game/C", "Content/C.uasset", "package", 7, 100),
        AssetRecord("/Game/D", "Content/D.uasset", "package", 8, 50),
    ]

    assert find_duplicates(records) == [
        {"hash": "0000000000000007", "assets": ["/Game/A", "/Game/B", "/Game/C"], "wastedBytes": 200}
    ]


def test_build_asset_list_filters_by_extension(sample_project: Path) -> None:
    result = analyze_project(sample_project, UefastConfig())

    maps = build_asset_list(result.collection.records, "umap")

    assert [asset["id"] for asset in maps] == ["/Game/Maps/Entry"]
    assert len(build_asset_list(result.collection.records, ".UASSET")) == 3


def test_render_dot_marks_soft_edges_and_startup_filter(sample_project: Path) -> None:
    result = analyze_project(sample_project, UefastConfig())
    graph = result.graph_result.graph

    full = render_dot(graph, plan=result.plan)
    startup = render_dot(graph, startup_only=True)

    assert full.startswith("digraph uefast {")
    assert '"/Game/Props/Barrel" -> "/Game/UI/Font" [style=dashed];' in full
    assert '"/Game/Maps/Entry" -> "/Game/UI/MainMenu";' in full
    assert "Barrel" not in startup
    assert '"/Game/UI/MainMenu" -> "/Game/UI/Font";' in startup


def test_write_report_failure_leaves_no_temp_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    output = tmp_path / "analysis.json"

    def _fail_replace(source: str, destination: Path) -> None:
        raise OSError("disk full")

    monkeypatch.setattr("uefast.io.files.os.replace", _fail_replace)

    with pytest.raises(ProjectIOError, match="disk full"):
        write_report(output, {"totalAssets": 0})

    assert list(tmp_path.iterdir()) == []


def test_write_report_ends_with_newline(tmp_path: Path) -> None:
    output = tmp_path / "assets.json"

    write_report(output, [{"id": "/Game/A"}])

    assert output.read_text(encoding="utf-8") == '[\n  {\n    "id": "/Game/A"\n  }\n]\n'


def test_analysis_report_groups_assets_by_type(sample_project: Path) -> None:
    report = build_analysis_report(analyze_project(sample_project, UefastConfig()), UefastConfig())

    font_size = (sample_project / "Content" / "UI" / "Font.uasset").stat().st_size
    assert list(report["byType"]) == ["uasset", "umap"]
    assert report["byType"]["umap"]["count"] == 1
    assert report["byType"]["uasset"]["count"] == 3
    assert report["byType"]["uasset"]["totalSizeBytes"] > font_size


def test_analysis_report_recommends_lazy_loading_for_high_startup_ratio(sample_project: Path) -> None:
    report = build_analysis_report(analyze_project(sample_project, UefastConfig()), UefastConfig())

    assert report["recommendations"] == [
        {
            "priority": "high",
            "category": "Startup",
            "message": "75% of assets are loaded at startup. Consider lazy loading.",
            "estimatedImpactSeconds": 7.5,
        }
    ]


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("Content/Maps/Entry.umap", "umap"),
        ("Content/UI/T_Logo.uasset", "texture"),
        ("Content/UI/MI_Glow.uasset", "material"),
        ("Content/UI/WBP_Menu.uasset", "blueprint"),
        ("Content/Audio/Theme.wav", "audio"),
        ("Content/Props/Barrel.uasset", "uasset"),
        ("Content/Props/Barrel.uexp", "uexp"),
        ("Content/Readme.txt", "other"),
    ],
    ids=["map", "texture_prefix", "material_prefix", "widget_prefix", "wav", "plain", "uexp", "unknown"],
)
def test_report_type_for_classifies_by_extension_and_prefix(path: str, expected: str) -> None:
    record = AssetRecord("/Game/X", path, "package", 0, 1)

    assert report_type_for(record) == expected


def test_generate_recommendations_applies_count_thresholds() -> None:
    by_type = {
        "texture": {"count": 1001, "totalSizeBytes": 0},
        "blueprint": {"count": 500, "totalSizeBytes": 0},
    }

    recommendations = generate_recommendations(2000, 100, by_type, duplicate_groups=4)

    assert [(item["priority"], item["category"]) for item in recommendations] == [
        ("medium", "Textures"),
        ("low", "Duplicates"),
    ]
    assert recommendations[1]["estimatedImpactSeconds"] == pytest.approx(0.2)


def test_generate_recommendations_empty_project() -> None:
    assert generate_recommendations(0, 0, {}) == []
