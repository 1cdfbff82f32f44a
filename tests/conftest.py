"""Shared pytest fixtures for synthetic asset projects."""

from __future__ import annotations

import struct
from collections.abc import Callable, Iterable
from pathlib import Path

import pytest
import yaml

from uefast.constants.discovery import PACKAGE_MAGIC

_OBJECT_IMPORT = ("/Script/Engine", "Texture2D")


def _fstring(value: str) -> bytes:
    encoded = value.encode("utf-8") + b"\x00"
    return struct.pack("<i", len(encoded)) + encoded


def build_package_bytes(
    package_name: str,
    references: Iterable[str] = (),
    *,
    padding: int = 0,
    script_imports: Iterable[str] = ("/Script/Engine",),
) -> bytes:
    """Encode a minimal package summary whose import table references *references*.

    Each reference becomes a top-level package import followed by an object
    import nested inside it, mirroring how the editor records hard references.
    """
    references = list(references)
    names: list[str] = ["/Script/CoreUObject", "Package", *_OBJECT_IMPORT]
    for value in [*script_imports, *references, *(ref.rsplit("/", 1)[-1] for ref in references)]:
        if value not in names:
            names.append(value)

    imports: list[tuple[int, int, int, int, int, int, int]] = []
    for value in script_imports:
        imports.append((names.index("/Script/CoreUObject"), 0, names.index("Package"), 0, 0, names.index(value), 0))
    for reference in references:
        imports.append((names.index("/Script/CoreUObject"), 0, names.index("Package"), 0, 0, names.index(reference), 0))
        outer = -len(imports)
        short_name = reference.rsplit("/", 1)[-1]
        imports.append(
            (
                names.index(_OBJECT_IMPORT[0]),
                0,
                names.index(_OBJECT_IMPORT[1]),
                0,
                outer,
                names.index(short_name),
                0,
            )
        )

    def summary(name_offset: int, import_offset: int) -> bytes:
        return b"".join(
            (
                struct.pack("<I", PACKAGE_MAGIC),
                struct.pack("<iiiii", -8, 864, 522, 1012, 0),
                struct.pack("<i", 0),
                struct.pack("<i", 0),
                _fstring(package_name),
                struct.pack("<I", 0),
                struct.pack("<ii", len(names), name_offset),
                b"\x00" * 16,
                struct.pack("<ii", 0, 0),
                struct.pack("<ii", len(imports), import_offset),
            )
        )

    name_table = b"".join(_fstring(name) + b"\x00" * 4 for name in names)
    import_table = b"".join(struct.pack("<7i", *entry) for entry in imports)
    head_length = len(summary(0, 0))
    head = summary(head_length, head_length + len(name_table))
    return head + name_table + import_table + b"\xab" * padding


AssetWriter = Callable[..., Path]


@pytest.fixture()
def package_bytes() -> Callable[..., bytes]:
    """Return the synthetic package encoder."""
    return build_package_bytes


@pytest.fixture()
def write_asset() -> AssetWriter:
    """Return a helper writing ``Content/<relative>`` plus an optional sidecar."""

    def _write(
        project_root: Path,
        relative: str,
        *,
        references: Iterable[str] = (),
        hard: list[str] | None = None,
        soft: list[str] | None = None,
        padding: int = 0,
    ) -> Path:
        path = project_root / "Content" / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        package_name = "/Game/" + Path(relative).with_suffix("").as_posix()
        path.write_bytes(build_package_bytes(package_name, references, padding=padding))
        if hard is not None or soft is not None:
            sidecar: dict[str, list[str]] = {}
            if hard is not None:
                sidecar["hard"] = hard
            if soft is not None:
                sidecar["soft"] = soft
            path.with_name(path.stem + ".refs.yaml").write_text(yaml.safe_dump(sidecar), encoding="utf-8")
        return path

    return _write


@pytest.fixture()
def sample_project(tmp_path: Path, write_asset: AssetWriter) -> Path:
    """Project with a startup map, a small dependency chain, and an unrelated prop."""
    root = tmp_path / "Demo"
    write_asset(root, "Maps/Entry.umap", references=["/Game/UI/MainMenu"])
    write_asset(root, "UI/MainMenu.uasset", references=["/Game/UI/Font", "/Engine/BasicShapes/Cube"])
    write_asset(root, "UI/Font.uasset", padding=2048)
    write_asset(root, "Props/Barrel.uasset", soft=["/Game/UI/Font"], padding=512)
    return root
