from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

_TOOLS_CONFIG_CACHE: dict[str, Any] | None = None
_TOOLS_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "tools.yaml"


def get_tools_config() -> dict[str, Any]:
    """Load static tool data from repo-level config/tools.yaml and cache it."""
    global _TOOLS_CONFIG_CACHE

    if _TOOLS_CONFIG_CACHE is not None:
        return _TOOLS_CONFIG_CACHE

    if not _TOOLS_CONFIG_PATH.exists():
        raise RuntimeError(
            f"Tools config not found at '{_TOOLS_CONFIG_PATH}'. "
            "Expected file: config/tools.yaml"
        )

    try:
        raw = _TOOLS_CONFIG_PATH.read_text(encoding="utf-8")
    except OSError as exc:
        raise RuntimeError(
            f"Failed to read tools config '{_TOOLS_CONFIG_PATH}': {exc}"
        ) from exc

    try:
        parsed = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise RuntimeError(
            f"Invalid YAML in tools config '{_TOOLS_CONFIG_PATH}': {exc}"
        ) from exc

    if not isinstance(parsed, dict):
        raise RuntimeError(
            f"Invalid tools config '{_TOOLS_CONFIG_PATH}': expected a top-level mapping."
        )

    _TOOLS_CONFIG_CACHE = parsed
    return _TOOLS_CONFIG_CACHE


def get_tools_value(path: str, default: Any = None) -> Any:
    """Get nested config value using dot path notation, e.g. 'fallbacks.keyword_scan'."""
    if not path:
        return default

    current: Any = get_tools_config()
    for key in path.split("."):
        if not isinstance(current, dict):
            return default
        if key not in current:
            return default
        current = current[key]
    return current
