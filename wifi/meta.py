from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AppMeta:
    """Static identity of the CLI (name, purpose, version)."""

    app_id: str
    purpose: str
    version: str


_META = AppMeta(
    app_id="wifi",
    purpose="Command-line Wi-Fi control for macOS (status, quality, scan, join, power)",
    version="1.0.0",
)

APP_ID = _META.app_id
PURPOSE = _META.purpose
VERSION = _META.version
