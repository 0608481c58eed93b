"""Branding constants for terminal output."""

from __future__ import annotations

BRAND_NAME: str = "ORDINANCE"
ASCII_LOGO_LINES: tuple[str, ...] = (
    ">_ ORDINANCE",
    "     // coding conventions, enforced",
)
CHECK_SUMMARY_TITLE: str = "Check summary"
CLI_DESCRIPTION: str = "\n".join((*ASCII_LOGO_LINES, "", f"{BRAND_NAME} rule-compliance engine"))
