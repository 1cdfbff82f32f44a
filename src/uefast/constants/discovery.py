"""Constants for asset discovery, reference tables, and ID derivation."""

from __future__ import annotations

MAP_EXTENSIONS: frozenset[str] = frozenset({".umap"})
SIDECAR_SUFFIX: str = ".refs.yaml"
SIDECAR_KEYS: frozenset[str] = frozenset({"hard", "soft"})

PACKAGE_MAGIC: int = 0x9E2A83C1
PACKAGE_REFERENCE_PREFIXES: tuple[str, ...] = ("/Game/", "/Engine/")
CUSTOM_VERSION_ENTRY_SIZE: int = 20
GATHERABLE_TEXT_BLOCK_SIZE: int = 16
NAME_HASH_SIZE: int = 4
IMPORT_ENTRY_SIZE: int = 28
