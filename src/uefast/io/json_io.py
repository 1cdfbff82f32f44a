"""Atomic JSON persistence for reports."""

from __future__ import annotations

import json
from pathlib import Path

from uefast.io.files import write_bytes_atomic


def write_json_atomic(
    *,
    path: Path,
    payload: object,
    temp_prefix: str,
    temp_suffix: str,
) -> None:
    """Serialize *payload* as indented, key-sorted JSON and write it atomically."""
    text = json.dumps(payload, indent=2, sort_keys=True) + "\n"
    write_bytes_atomic(path=path, data=text.encode("utf-8"), temp_prefix=temp_prefix, temp_suffix=temp_suffix)
