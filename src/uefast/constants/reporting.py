"""Constants for report files and atomic writing."""

from __future__ import annotations

REPORT_TEMP_PREFIX: str = ".tmp-"
REPORT_TEMP_SUFFIX: str = ".json"

SCHEMA_VERSION: str = "1.0.0"

DOT_GRAPH_NAME: str = "uefast"
VERIFY_DIFF_PREVIEW_LIMIT: int = 10

# File extension to report type; ".uasset" falls through to the name prefixes below.
ASSET_TYPE_BY_EXTENSION: dict[str, str] = {
    ".umap": "umap",
    ".uexp": "uexp",
    ".ubulk": "ubulk",
    ".ushaderbytecode": "shader",
    ".ush": "shader",
    ".png": "texture",
    ".jpg": "texture",
    ".tga": "texture",
    ".dds": "texture",
    ".exr": "texture",
    ".wav": "audio",
    ".ogg": "audio",
    ".mp3": "audio",
    ".uanimation": "animation",
}
ASSET_TYPE_BY_NAME_PREFIX: tuple[tuple[str, str], ...] = (
    ("T_", "texture"),
    ("M_", "material"),
    ("MI_", "material"),
    ("BP_", "blueprint"),
    ("WBP_", "blueprint"),
    ("A_", "audio"),
    ("SW_", "audio"),
    ("AS_", "animation"),
)
PACKAGE_REPORT_TYPE: str = "uasset"
OTHER_REPORT_TYPE: str = "other"

STARTUP_RATIO_THRESHOLD: float = 0.3
STARTUP_RATIO_IMPACT_SECONDS: float = 10.0
TEXTURE_COUNT_THRESHOLD: int = 1000
TEXTURE_IMPACT_SECONDS: float = 5.0
BLUEPRINT_COUNT_THRESHOLD: int = 500
BLUEPRINT_IMPACT_SECONDS: float = 3.0
DUPLICATE_GROUP_IMPACT_SECONDS: float = 0.05
RECOMMENDATION_PRIORITIES: tuple[str, ...] = ("high", "medium", "low")
