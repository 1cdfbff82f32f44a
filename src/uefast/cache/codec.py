"""Binary encoding of the startup cache.

Layout (all integers little-endian)::

    header  magic[8] "UEFAST01" | u32 version | u32 crc32(body) | u64 len(body)
    body    hash table | graph | load plan

Strings are a ``u32`` byte length followed by UTF-8. Every collection is
written in asset-ID order so unchanged input produces identical bytes.
Decoding is strict: anything unexpected raises ``CacheFormatError``.
"""

from __future__ import annotations

import struct
import zlib
from collections import defaultdict

from uefast.constants.cache import (
    ASSET_KIND_CODES,
    CACHE_FORMAT_VERSION,
    CACHE_HEADER,
    CACHE_MAGIC,
    EDGE_KIND_CODES,
    SUPPORTED_CACHE_VERSIONS,
)
from uefast.exceptions import CacheFormatError
from uefast.model import (
    AssetRecord,
    CacheContents,
    CacheHeader,
    DependencyEdge,
    DependencyGraph,
    LoadBatch,
    LoadPlan,
)

_U8 = struct.Struct("<B")
_U32 = struct.Struct("<I")
_U64 = struct.Struct("<Q")
_F64 = struct.Struct("<d")

_ASSET_KINDS = {code: kind for kind, code in ASSET_KIND_CODES.items()}
_EDGE_KINDS = {code: kind for kind, code in EDGE_KIND_CODES.items()}

BAD_MAGIC = "bad_magic"
UNSUPPORTED_VERSION = "unsupported_version"
CHECKSUM_MISMATCH = "checksum_mismatch"
CORRUPT = "corrupt"


def body_checksum(body: bytes) -> int:
    return zlib.crc32(body) & 0xFFFFFFFF


def encode_cache(contents: CacheContents) -> bytes:
    """Encode graph, plan, and hash table into header-prefixed cache bytes."""
    body = encode_body(contents)
    header = CACHE_HEADER.pack(CACHE_MAGIC, CACHE_FORMAT_VERSION, body_checksum(body), len(body))
    return header + body


def encode_body(contents: CacheContents) -> bytes:
    writer = _Writer()

    writer.u32(len(contents.hash_table))
    for asset_id in sorted(contents.hash_table):
        writer.string(asset_id)
        writer.u64(contents.hash_table[asset_id])

    graph = contents.graph
    writer.u32(len(graph.assets))
    for asset_id in graph.asset_ids():
        record = graph.assets[asset_id]
        writer.string(record.asset_id)
        writer.string(record.path)
        writer.u8(ASSET_KIND_CODES[record.kind])
        writer.u64(record.size_bytes)
        writer.u8(1 if record.startup_critical else 0)
    edges = sorted(graph.edges)
    writer.u32(len(edges))
    for edge in edges:
        writer.string(edge.source)
        writer.string(edge.target)
        writer.u8(EDGE_KIND_CODES[edge.kind])

    plan = contents.plan
    writer.u32(plan.parallelism)
    writer.f64(plan.estimated_total_seconds)
    writer.f64(plan.serial_baseline_seconds)
    writer.u32(len(plan.batches))
    for batch in plan.batches:
        writer.u32(batch.index)
        writer.u32(batch.layer)
        writer.f64(batch.estimated_seconds)
        writer.u32(len(batch.assets))
        for asset_id in sorted(batch.assets):
            writer.string(asset_id)

    return writer.getvalue()


def read_header(data: bytes) -> CacheHeader:
    """Parse and check the magic and version of a cache header.

    Raises:
        CacheFormatError: ``bad_magic`` for short data or a foreign magic,
            ``unsupported_version`` for versions this engine cannot read,
            ``checksum_mismatch`` when the header itself is truncated.
    """
    if len(data) < len(CACHE_MAGIC) or data[: len(CACHE_MAGIC)] != CACHE_MAGIC:
        raise CacheFormatError(BAD_MAGIC, "Cache magic does not match UEFAST01")
    if len(data) < CACHE_HEADER.size:
        raise CacheFormatError(CHECKSUM_MISMATCH, f"Cache header truncated: {len(data)} bytes")
    magic, version, checksum, body_length = CACHE_HEADER.unpack_from(data)
    if version not in SUPPORTED_CACHE_VERSIONS:
        raise CacheFormatError(UNSUPPORTED_VERSION, f"Unsupported cache format version {version}")
    return CacheHeader(magic=magic, version=version, checksum=checksum, body_length=body_length)


def decode_cache(data: bytes) -> CacheContents:
    """Decode cache bytes, rejecting any structural mismatch."""
    header = read_header(data)
    body = data[CACHE_HEADER.size :]
    if len(body) != header.body_length:
        raise CacheFormatError(
            CHECKSUM_MISMATCH,
            f"Cache body length {len(body)} does not match header ({header.body_length})",
        )
    actual = body_checksum(body)
    if actual != header.checksum:
        raise CacheFormatError(
            CHECKSUM_MISMATCH,
            f"Cache body checksum {actual:08x} does not match header ({header.checksum:08x})",
        )
    return decode_body(body)


def decode_body(body: bytes) -> CacheContents:
    reader = _Reader(body)

    hash_table: dict[str, int] = {}
    for _ in range(reader.u32()):
        asset_id = reader.string()
        if asset_id in hash_table:
            raise CacheFormatError(CORRUPT, f"Duplicate hash table entry {asset_id!r}")
        hash_table[asset_id] = reader.u64()

    records: list[AssetRecord] = []
    rows: list[tuple[str, str, int, int, bool]] = []
    for _ in range(reader.u32()):
        asset_id = reader.string()
        path = reader.string()
        kind_code = reader.u8()
        size_bytes = reader.u64()
        startup_critical = reader.flag()
        if kind_code not in _ASSET_KINDS:
            raise CacheFormatError(CORRUPT, f"Unknown asset kind code {kind_code}")
        rows.append((asset_id, path, kind_code, size_bytes, startup_critical))

    known = [row[0] for row in rows]
    if known != sorted(set(known)):
        raise CacheFormatError(CORRUPT, "Graph assets are not unique and sorted")
    if set(known) != set(hash_table):
        raise CacheFormatError(CORRUPT, "Graph assets do not match the hash table")

    edges: list[DependencyEdge] = []
    known_ids = set(known)
    for _ in range(reader.u32()):
        source = reader.string()
        target = reader.string()
        kind_code = reader.u8()
        if kind_code not in _EDGE_KINDS:
            raise CacheFormatError(CORRUPT, f"Unknown edge kind code {kind_code}")
        if source not in known_ids or target not in known_ids:
            raise CacheFormatError(CORRUPT, f"Edge {source} -> {target} references an unknown asset")
        edges.append(DependencyEdge(source, target, _EDGE_KINDS[kind_code]))
    if edges != sorted(set(edges)):
        raise CacheFormatError(CORRUPT, "Graph edges are not unique and sorted")

    hard_by_source: dict[str, list[str]] = defaultdict(list)
    soft_by_source: dict[str, list[str]] = defaultdict(list)
    for edge in edges:
        (hard_by_source if edge.kind == "hard" else soft_by_source)[edge.source].append(edge.target)

    for asset_id, path, kind_code, size_bytes, startup_critical in rows:
        records.append(
            AssetRecord(
                asset_id=asset_id,
                path=path,
                kind=_ASSET_KINDS[kind_code],
                content_hash=hash_table[asset_id],
                size_bytes=size_bytes,
                hard_dependencies=tuple(hard_by_source.get(asset_id, ())),
                soft_dependencies=tuple(soft_by_source.get(asset_id, ())),
                startup_critical=startup_critical,
            )
        )

    parallelism = reader.u32()
    estimated_total = reader.f64()
    serial_baseline = reader.f64()
    batches: list[LoadBatch] = []
    for position in range(reader.u32()):
        index = reader.u32()
        layer = reader.u32()
        estimate = reader.f64()
        assets = tuple(reader.string() for _ in range(reader.u32()))
        if index != position:
            raise CacheFormatError(CORRUPT, f"Batch index {index} out of sequence (expected {position})")
        unknown = [asset_id for asset_id in assets if asset_id not in known_ids]
        if unknown:
            raise CacheFormatError(CORRUPT, f"Batch {index} references unknown assets: {', '.join(unknown)}")
        batches.append(LoadBatch(index=index, layer=layer, assets=assets, estimated_seconds=estimate))

    if parallelism < 1:
        raise CacheFormatError(CORRUPT, f"Invalid plan parallelism {parallelism}")
    reader.expect_end()
    _check_plan(batches, known, edges)

    return CacheContents(
        graph=DependencyGraph(assets={record.asset_id: record for record in records}, edges=tuple(edges)),
        plan=LoadPlan(
            batches=tuple(batches),
            parallelism=parallelism,
            estimated_total_seconds=estimated_total,
            serial_baseline_seconds=serial_baseline,
        ),
        hash_table=hash_table,
    )


def _check_plan(batches: list[LoadBatch], asset_ids: list[str], edges: list[DependencyEdge]) -> None:
    """Require every asset exactly once, in non-decreasing layers, after its hard dependencies."""
    batch_of: dict[str, int] = {}
    previous_layer = 0
    for batch in batches:
        if not batch.assets:
            raise CacheFormatError(CORRUPT, f"Batch {batch.index} is empty")
        if batch.layer < previous_layer:
            raise CacheFormatError(
                CORRUPT, f"Batch {batch.index} layer {batch.layer} precedes layer {previous_layer}"
            )
        previous_layer = batch.layer
        for asset_id in batch.assets:
            if asset_id in batch_of:
                raise CacheFormatError(
                    CORRUPT, f"Asset {asset_id} planned in batches {batch_of[asset_id]} and {batch.index}"
                )
            batch_of[asset_id] = batch.index

    missing = [asset_id for asset_id in asset_ids if asset_id not in batch_of]
    if missing:
        raise CacheFormatError(CORRUPT, f"Load plan omits {len(missing)} assets, first {missing[0]}")
    for edge in edges:
        if edge.kind == "hard" and batch_of[edge.target] >= batch_of[edge.source]:
            raise CacheFormatError(
                CORRUPT, f"Hard dependency {edge.source} -> {edge.target} is not loaded in an earlier batch"
            )


class _Writer:
    def __init__(self) -> None:
        self._buffer = bytearray()

    def u8(self, value: int) -> None:
        self._buffer += _U8.pack(value)

    def u32(self, value: int) -> None:
        self._buffer += _U32.pack(value)

    def u64(self, value: int) -> None:
        self._buffer += _U64.pack(value)

    def f64(self, value: float) -> None:
        self._buffer += _F64.pack(value)

    def string(self, value: str) -> None:
        encoded = value.encode("utf-8")
        self.u32(len(encoded))
        self._buffer += encoded

    def getvalue(self) -> bytes:
        return bytes(self._buffer)


class _Reader:
    def __init__(self, data: bytes) -> None:
        self._data = data
        self._offset = 0

    def _unpack(self, fmt: struct.Struct) -> int | float:
        try:
            (value,) = fmt.unpack_from(self._data, self._offset)
        except struct.error as exc:
            raise CacheFormatError(CORRUPT, f"Cache body truncated at offset {self._offset}") from exc
        self._offset += fmt.size
        return value

    def u8(self) -> int:
        return int(self._unpack(_U8))

    def u32(self) -> int:
        return int(self._unpack(_U32))

    def u64(self) -> int:
        return int(self._unpack(_U64))

    def f64(self) -> float:
        return float(self._unpack(_F64))

    def flag(self) -> bool:
        value = self.u8()
        if value not in (0, 1):
            raise CacheFormatError(CORRUPT, f"Invalid boolean byte {value} at offset {self._offset - 1}")
        return value == 1

    def string(self) -> str:
        length = self.u32()
        end = self._offset + length
        if end > len(self._data):
            raise CacheFormatError(CORRUPT, f"String of {length} bytes overruns cache body at offset {self._offset}")
        raw = self._data[self._offset : end]
        self._offset = end
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise CacheFormatError(CORRUPT, f"Invalid UTF-8 string in cache body: {exc}") from exc

    def expect_end(self) -> None:
        if self._offset != len(self._data):
            raise CacheFormatError(CORRUPT, f"{len(self._data) - self._offset} trailing bytes after cache body")
