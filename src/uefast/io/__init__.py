"""Shared file I/O helpers."""

from .files import hash_bytes, write_bytes_atomic
from .json_io import write_json_atomic

__all__ = ["hash_bytes", "write_bytes_atomic", "write_json_atomic"]
