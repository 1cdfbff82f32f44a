"""Atomic persistence of startup cache files."""

from __future__ import annotations

import logging
from pathlib import Path

from uefast.cache.codec import decode_cache, encode_cache, read_header
from uefast.constants.cache import CACHE_TEMP_PREFIX, CACHE_TEMP_SUFFIX, DEFAULT_CACHE_RELATIVE_PATH
from uefast.exceptions import ProjectIOError
from uefast.io import write_bytes_atomic
from uefast.model import CacheContents, CacheHeader

logger = logging.getLogger(__name__)


def default_cache_path(project_root: Path) -> Path:
    """Return the cache location the editor plugin looks for."""
    return project_root.joinpath(*DEFAULT_CACHE_RELATIVE_PATH)


def write_cache(path: Path, contents: CacheContents) -> int:
    """Encode and atomically replace the cache at *path*; return the byte size.

    The previous file, if any, stays untouched until the final rename.
    """
    data = encode_cache(contents)
    try:
        write_bytes_atomic(path=path, data=data, temp_prefix=CACHE_TEMP_PREFIX, temp_suffix=CACHE_TEMP_SUFFIX)
    except OSError as exc:
        raise ProjectIOError(f"Cannot write cache file {path}: {exc}") from exc
    logger.info("Cache saved to %s (%d bytes)", path, len(data))
    return len(data)


def _read_bytes(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as exc:
        raise ProjectIOError(f"Cannot read cache file {path}: {exc}") from exc


def read_cache(path: Path) -> CacheContents:
    """Read and decode a cache file.

    Raises:
        ProjectIOError: When the file cannot be read.
        CacheFormatError: When the bytes are rejected by the decoder.
    """
    return decode_cache(_read_bytes(path))


def inspect_cache(path: Path) -> tuple[CacheHeader, CacheContents, int]:
    """Decode a cache file and also return its header and on-disk size."""
    data = _read_bytes(path)
    contents = decode_cache(data)
    return read_header(data), contents, len(data)
