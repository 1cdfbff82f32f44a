"""File-level helpers for content hashing and atomic binary writes."""

from __future__ import annotations

import hashlib
import os
import tempfile
from contextlib import suppress
from pathlib import Path

from uefast.constants.cache import CONTENT_HASH_DIGEST_SIZE


def hash_bytes(data: bytes) -> int:
    """Return the deterministic 64-bit content digest of *data*."""
    digest = hashlib.blake2b(data, digest_size=CONTENT_HASH_DIGEST_SIZE)
    return int.from_bytes(digest.digest(), "little")


def write_bytes_atomic(
    *,
    path: Path,
    data: bytes,
    temp_prefix: str,
    temp_suffix: str,
) -> None:
    """Persist bytes atomically; readers see the old file or the new one, never a mix."""
    path.parent.mkdir(parents=True, exist_ok=True)

    temp_name: str | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="wb",
            dir=path.parent,
            prefix=temp_prefix,
            suffix=temp_suffix,
            delete=False,
        ) as handle:
            temp_name = handle.name
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(temp_name, path)
    except Exception:
        if temp_name:
            with suppress(FileNotFoundError):
                Path(temp_name).unlink()
        raise
