"""Cross-module type aliases."""

from __future__ import annotations

from typing import Literal, TypeAlias

AssetKind: TypeAlias = Literal["package", "map"]
EdgeKind: TypeAlias = Literal["hard", "soft"]

JsonScalar: TypeAlias = str | int | float | bool | None
JsonValue: TypeAlias = JsonScalar | list["JsonValue"] | dict[str, "JsonValue"]
JsonObject: TypeAlias = dict[str, JsonValue]
