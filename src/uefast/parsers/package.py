"""Reader for the package summary and import table at the head of ``.uasset``/``.umap`` files.

Only the fields needed to recover package-level hard references are
decoded. Every integer is little-endian. Strings use the length-prefixed
form where a positive length counts bytes (including the trailing NUL)
and a negative length counts UTF-16 code units.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass

from uefast.constants.discovery import (
    CUSTOM_VERSION_ENTRY_SIZE,
    GATHERABLE_TEXT_BLOCK_SIZE,
    IMPORT_ENTRY_SIZE,
    NAME_HASH_SIZE,
    PACKAGE_MAGIC,
    PACKAGE_REFERENCE_PREFIXES,
)
from uefast.exceptions import AssetParseError

_I32 = struct.Struct("<i")
_U32 = struct.Struct("<I")


@dataclass(frozen=True)
class PackageImport:
    """One entry of a package import table."""

    class_package: str
    class_name: str
    outer_index: int
    object_name: str


@dataclass(frozen=True)
class PackageSummary:
    """Decoded package header fields relevant to dependency extraction."""

    package_name: str
    package_flags: int
    file_version_ue4: int
    file_version_ue5: int
    names: tuple[str, ...]
    imports: tuple[PackageImport, ...]

    def package_dependencies(self) -> tuple[str, ...]:
        """Return sorted package paths imported at the top level."""
        found = {
            entry.object_name
            for entry in self.imports
            if entry.outer_index == 0 and entry.object_name.startswith(PACKAGE_REFERENCE_PREFIXES)
        }
        return tuple(sorted(found))


class _Cursor:
    """Bounds-checked sequential reader over a byte buffer."""

    def __init__(self, data: bytes, source: str, offset: int = 0) -> None:
        self._data = data
        self._source = source
        self.offset = offset

    def take(self, size: int, what: str) -> bytes:
        end = self.offset + size
        if size < 0 or end > len(self._data):
            raise AssetParseError(f"Truncated package data in {self._source}: cannot read {what}")
        chunk = self._data[self.offset : end]
        self.offset = end
        return chunk

    def skip(self, size: int, what: str) -> None:
        self.take(size, what)

    def i32(self, what: str) -> int:
        return _I32.unpack(self.take(_I32.size, what))[0]

    def u32(self, what: str) -> int:
        return _U32.unpack(self.take(_U32.size, what))[0]

    def fstring(self, what: str) -> str:
        length = self.i32(f"{what} length")
        if length == 0:
            return ""
        if length > 0:
            raw = self.take(length, what)
            return raw.rstrip(b"\x00").decode("utf-8", errors="replace")
        raw = self.take(-length * 2, what)
        return raw.decode("utf-16-le", errors="replace").rstrip("\x00")


def parse_package_summary(data: bytes, *, source: str = "<bytes>") -> PackageSummary:
    """Decode the package summary, name table, and import table from *data*.

    Raises:
        AssetParseError: On a wrong magic number, truncation, negative
            counts, or indices pointing outside the name table.
    """
    cursor = _Cursor(data, source)
    magic = cursor.u32("magic")
    if magic != PACKAGE_MAGIC:
        raise AssetParseError(f"Invalid package magic in {source}: {magic:08X}")

    cursor.i32("legacy version")
    cursor.i32("legacy UE3 version")
    file_version_ue4 = cursor.i32("UE4 file version")
    file_version_ue5 = cursor.i32("UE5 file version")
    cursor.i32("licensee version")

    custom_version_count = _non_negative(cursor.i32("custom version count"), "custom version count", source)
    cursor.skip(custom_version_count * CUSTOM_VERSION_ENTRY_SIZE, "custom versions")

    cursor.i32("total header size")
    package_name = cursor.fstring("package name")
    package_flags = cursor.u32("package flags")

    name_count = _non_negative(cursor.i32("name count"), "name count", source)
    name_offset = _non_negative(cursor.i32("name offset"), "name offset", source)
    cursor.skip(GATHERABLE_TEXT_BLOCK_SIZE, "gatherable text data")
    cursor.i32("export count")
    cursor.i32("export offset")
    import_count = _non_negative(cursor.i32("import count"), "import count", source)
    import_offset = _non_negative(cursor.i32("import offset"), "import offset", source)

    names = _read_name_table(data, source, name_offset, name_count)
    imports = _read_import_table(data, source, import_offset, import_count, names)

    return PackageSummary(
        package_name=package_name,
        package_flags=package_flags,
        file_version_ue4=file_version_ue4,
        file_version_ue5=file_version_ue5,
        names=names,
        imports=imports,
    )


def _read_name_table(data: bytes, source: str, offset: int, count: int) -> tuple[str, ...]:
    if count == 0:
        return ()
    cursor = _Cursor(data, source, offset)
    names: list[str] = []
    for index in range(count):
        names.append(cursor.fstring(f"name {index}"))
        cursor.skip(NAME_HASH_SIZE, f"name {index} hash")
    return tuple(names)


def _read_import_table(
    data: bytes,
    source: str,
    offset: int,
    count: int,
    names: tuple[str, ...],
) -> tuple[PackageImport, ...]:
    if count == 0:
        return ()
    cursor = _Cursor(data, source, offset)
    imports: list[PackageImport] = []
    for index in range(count):
        entry = _Cursor(cursor.take(IMPORT_ENTRY_SIZE, f"import {index}"), source)
        class_package = _name_at(names, entry.i32("class package"), source)
        entry.i32("class package number")
        class_name = _name_at(names, entry.i32("class name"), source)
        entry.i32("class name number")
        outer_index = entry.i32("outer index")
        object_name = _name_at(names, entry.i32("object name"), source)
        imports.append(
            PackageImport(
                class_package=class_package,
                class_name=class_name,
                outer_index=outer_index,
                object_name=object_name,
            )
        )
    return tuple(imports)


def _name_at(names: tuple[str, ...], index: int, source: str) -> str:
    if index < 0 or index >= len(names):
        raise AssetParseError(f"Name index {index} out of range in {source} ({len(names)} names)")
    return names[index]


def _non_negative(value: int, what: str, source: str) -> int:
    if value < 0:
        raise AssetParseError(f"Negative {what} in {source}: {value}")
    return value
