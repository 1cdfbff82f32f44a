"""Constants for the binary startup cache format and hashing."""

from __future__ import annotations

import struct

CACHE_MAGIC: bytes = b"UEFAST01"
CACHE_FORMAT_VERSION: int = 1
SUPPORTED_CACHE_VERSIONS: frozenset[int] = frozenset({CACHE_FORMAT_VERSION})

# magic, format version, body CRC-32, body length
CACHE_HEADER: struct.Struct = struct.Struct("<8sIIQ")

CACHE_TEMP_PREFIX: str = ".uefast-"
CACHE_TEMP_SUFFIX: str = ".tmp"
DEFAULT_CACHE_RELATIVE_PATH: tuple[str, ...] = ("Saved", "FastStartup", "startup.uefast")

CONTENT_HASH_DIGEST_SIZE: int = 8

ASSET_KIND_CODES: dict[str, int] = {"package": 0, "map": 1}
EDGE_KIND_CODES: dict[str, int] = {"hard": 0, "soft": 1}
