"""Parsers for asset reference tables."""

from .package import PackageImport, PackageSummary, parse_package_summary
from .sidecar import SidecarReferences, parse_sidecar_file, sidecar_path_for

__all__ = [
    "PackageImport",
    "PackageSummary",
    "SidecarReferences",
    "parse_package_summary",
    "parse_sidecar_file",
    "sidecar_path_for",
]
