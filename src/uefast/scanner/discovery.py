"""Asset file discovery and asset-ID derivation helpers."""

from __future__ import annotations

import fnmatch
import logging
from pathlib import Path

from uefast.constants.discovery import MAP_EXTENSIONS
from uefast.types import AssetKind

logger = logging.getLogger(__name__)


def discover_asset_files(
    content_root: Path,
    include_globs: tuple[str, ...],
    exclude_globs: tuple[str, ...] = (),
) -> list[Path]:
    """Discover asset files under *content_root* by configured glob patterns."""
    discovered: set[Path] = set()
    resolved_root = content_root.resolve()

    for pattern in include_globs:
        for path in resolved_root.glob(pattern):
            if not path.is_file():
                continue
            relative = _stable_path_key(path, resolved_root)
            if any(fnmatch.fnmatchcase(relative, excluded) for excluded in exclude_globs):
                logger.debug("Excluded by pattern: %s", relative)
                continue
            discovered.add(path)

    return sorted(discovered, key=lambda path: _stable_path_key(path, resolved_root))


def asset_id_for(file_path: Path, content_root: Path, mount_point: str) -> str:
    """Derive the stable package-path ID (``/Game/Maps/Entry``) for an asset file."""
    relative = file_path.relative_to(content_root).with_suffix("")
    return f"{mount_point.rstrip('/')}/{relative.as_posix()}"


def asset_kind_for(file_path: Path) -> AssetKind:
    if file_path.suffix.lower() in MAP_EXTENSIONS:
        return "map"
    return "package"


def project_relative_path(file_path: Path, project_root: Path) -> str:
    """Render *file_path* relative to the project root when possible."""
    return _stable_path_key(file_path, project_root)


def _stable_path_key(file_path: Path, root: Path) -> str:
    """Return a deterministic path key relative to *root* when possible."""
    try:
        return file_path.relative_to(root).as_posix()
    except ValueError:
        return file_path.as_posix()
