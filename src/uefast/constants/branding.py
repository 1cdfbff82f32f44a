"""Branding constants for terminal output."""

from __future__ import annotations

BRAND_NAME: str = "UEFAST"
ASCII_LOGO_LINES: tuple[str, ...] = (
    ">_ UEFAST",
    "     // startup cache builder for asset projects",
)
CLI_DESCRIPTION: str = "\n".join((*ASCII_LOGO_LINES, "", f"{BRAND_NAME} startup accelerator"))
