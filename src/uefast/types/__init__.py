"""Shared type aliases for uefast."""

from .common import AssetKind, EdgeKind, JsonObject, JsonScalar, JsonValue

__all__ = [
    "AssetKind",
    "EdgeKind",
    "JsonObject",
    "JsonScalar",
    "JsonValue",
]
