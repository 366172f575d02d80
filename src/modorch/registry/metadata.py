"""Metadata reading and normalization shared by the source readers."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from modorch.registry.types import PATH_KEYS

logger = logging.getLogger(__name__)

__all__ = [
    "read_json",
    "get_nested",
    "normalize_paths",
    "normalize_strings",
    "normalize_providers",
    "studly",
]


def read_json(path: str | Path) -> Any:
    """Parse a JSON file.

    Returns None if the file does not exist, cannot be read, or is not
    valid JSON. Callers decide whether that deserves a warning.
    """
    path = Path(path)
    if not path.is_file():
        return None
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        logger.debug("Unable to read %s: %s", path, e)
        return None
    try:
        return json.loads(content)
    except ValueError as e:
        logger.debug("Invalid JSON in %s: %s", path, e)
        return None


def get_nested(data: Any, key: str, default: Any = None) -> Any:
    """Look up a dot-path key in nested mappings."""
    current = data
    for part in key.split("."):
        if isinstance(current, dict) and part in current:
            current = current[part]
        else:
            return default
    return current


def normalize_strings(values: Any) -> list[str]:
    """Keep the non-empty strings of a list, in order."""
    if not isinstance(values, (list, tuple)):
        return []
    return [value for value in values if isinstance(value, str) and value]


def normalize_providers(providers: Any) -> list[str]:
    """Like normalize_strings, but a single string becomes a one-item list."""
    if isinstance(providers, str):
        return [providers] if providers else []
    return normalize_strings(providers)


def normalize_paths(meta: Any) -> dict[str, Any]:
    """Extract the recognized capability paths from a metadata mapping.

    Only the keys in PATH_KEYS survive. List values are filtered to
    non-empty strings; a scalar survives only as a non-empty string.
    """
    if not isinstance(meta, dict):
        return {}

    paths: dict[str, Any] = {}
    for key in PATH_KEYS:
        if key not in meta:
            continue
        value = meta[key]
        if isinstance(value, list):
            paths[key] = normalize_strings(value)
        elif isinstance(value, str) and value:
            paths[key] = value
    return paths


def studly(value: str) -> str:
    """Convert 'foo-bar_baz qux' to 'FooBarBazQux'."""
    words = value.replace("-", " ").replace("_", " ").split()
    return "".join(word[:1].upper() + word[1:] for word in words)
