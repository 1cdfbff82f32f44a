"""Tests for the package summary and import table reader."""

from __future__ import annotations

import struct
from collections.abc import Callable

import pytest

from uefast.exceptions import AssetParseError
from uefast.parsers import parse_package_summary


def test_parse_package_summary_reads_name_and_versions(package_bytes: Callable[..., bytes]) -> None:
    summary = parse_package_summary(package_bytes("/Game/UI/MainMenu"))

    assert summary.package_name == "/Game/UI/MainMenu"
    assert summary.file_version_ue4 == 522
    assert summary.file_version_ue5 == 1012
    assert "Package" in summary.names


def test_package_dependencies_keeps_top_level_game_and_engine_imports(
    package_bytes: Callable[..., bytes],
) -> None:
    data = package_bytes("/Game/Hero", ["/Game/Weapons/Sword", "/Engine/BasicShapes/Cube", "/Game/Armor/Helmet"])

    summary = parse_package_summary(data)

    assert summary.package_dependencies() == (
        "/Engine/BasicShapes/Cube",
        "/Game/Armor/Helmet",
        "/Game/Weapons/Sword",
    )


def test_package_dependencies_ignore_script_and_nested_imports(package_bytes: Callable[..., bytes]) -> None:
    summary = parse_package_summary(package_bytes("/Game/Hero", ["/Game/Weapons/Sword"]))

    nested = [entry for entry in summary.imports if entry.outer_index != 0]
    assert nested and all(entry.class_name == "Texture2D" for entry in nested)
    assert summary.package_dependencies() == ("/Game/Weapons/Sword",)


def test_parse_package_summary_without_imports(package_bytes: Callable[..., bytes]) -> None:
    summary = parse_package_summary(package_bytes("/Game/Empty", script_imports=()))

    assert summary.imports == ()
    assert summary.package_dependencies() == ()


def test_parse_package_summary_rejects_bad_magic(package_bytes: Callable[..., bytes]) -> None:
    data = b"\x00\x00\x00\x00" + package_bytes("/Game/Hero")[4:]

    with pytest.raises(AssetParseError, match="magic"):
        parse_package_summary(data, source="Hero.uasset")


@pytest.mark.parametrize("length", [0, 3, 20, 60])
def test_parse_package_summary_rejects_truncated_data(package_bytes: Callable[..., bytes], length: int) -> None:
    data = package_bytes("/Game/Hero", ["/Game/Weapons/Sword"])[:length]

    with pytest.raises(AssetParseError):
        parse_package_summary(data)


def test_parse_package_summary_rejects_truncated_import_table(package_bytes: Callable[..., bytes]) -> None:
    data = package_bytes("/Game/Hero", ["/Game/Weapons/Sword"])

    with pytest.raises(AssetParseError, match="Truncated"):
        parse_package_summary(data[:-10])


def test_parse_package_summary_rejects_out_of_range_name_index(package_bytes: Callable[..., bytes]) -> None:
    data = bytearray(package_bytes("/Game/Hero", ["/Game/Weapons/Sword"]))
    # The last import entry ends the buffer; its object-name index is the sixth i32.
    struct.pack_into("<i", data, len(data) - 8, 999)

    with pytest.raises(AssetParseError, match="out of range"):
        parse_package_summary(bytes(data))
