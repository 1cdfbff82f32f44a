"""Startup cache encoding, persistence, and validation."""

from __future__ import annotations

from .codec import decode_cache, encode_cache, read_header
from .store import default_cache_path, inspect_cache, read_cache, write_cache
from .validator import CacheVerdict, ReasonCode, validate_cache, verify_project_cache

__all__ = [
    "CacheVerdict",
    "ReasonCode",
    "decode_cache",
    "default_cache_path",
    "encode_cache",
    "inspect_cache",
    "read_cache",
    "read_header",
    "validate_cache",
    "verify_project_cache",
    "write_cache",
]
