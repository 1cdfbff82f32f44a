"""Parser for ``<stem>.refs.yaml`` files declaring extra asset references."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from uefast.constants.discovery import SIDECAR_KEYS, SIDECAR_SUFFIX
from uefast.exceptions import AssetParseError


@dataclass(frozen=True)
class SidecarReferences:
    """Hard and soft references declared next to an asset."""

    hard: tuple[str, ...] = ()
    soft: tuple[str, ...] = ()


def sidecar_path_for(asset_path: Path) -> Path:
    """Return the sidecar location for *asset_path* (``Hero.uasset`` -> ``Hero.refs.yaml``)."""
    return asset_path.with_name(asset_path.stem + SIDECAR_SUFFIX)


def parse_sidecar_file(path: Path) -> SidecarReferences:
    """Parse a sidecar reference file.

    An empty file declares no references. Anything other than a mapping with
    optional ``hard``/``soft`` string lists is rejected.
    """
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        raise AssetParseError(f"Cannot read reference sidecar {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise AssetParseError(f"Failed to parse reference sidecar {path}: {exc}") from exc

    if raw is None:
        return SidecarReferences()
    if not isinstance(raw, dict):
        raise AssetParseError(f"Reference sidecar {path} must be a YAML mapping")

    unknown = sorted(str(key) for key in raw if key not in SIDECAR_KEYS)
    if unknown:
        raise AssetParseError(f"Unknown key(s) in reference sidecar {path}: {', '.join(unknown)}")

    return SidecarReferences(
        hard=_reference_list(raw.get("hard"), "hard", path),
        soft=_reference_list(raw.get("soft"), "soft", path),
    )


def _reference_list(value: object, key: str, path: Path) -> tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise AssetParseError(f"`{key}` in reference sidecar {path} must be a list of strings")
    return tuple(sorted({item.strip() for item in value if item.strip()}))
