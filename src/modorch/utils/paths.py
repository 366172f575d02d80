"""Lexical path canonicalization relative to a base directory."""

from __future__ import annotations

import os

__all__ = ["canonicalize_path", "absolute_path", "is_absolute_path"]


def canonicalize_path(path: str, separator: str = os.sep) -> str:
    """Normalize separators and resolve '.' and '..' segments lexically.

    No filesystem access and no symlink resolution. A leading root separator
    or a drive prefix (first segment containing ':') is preserved. A '..'
    that would climb above the root is dropped.

    Args:
        path: The path to canonicalize. Both '/' and '\\' act as separators.
        separator: Separator used in the result.

    Returns:
        The canonical path.
    """
    path = path.replace("\\", separator).replace("/", separator)
    segments = path.split(separator)
    prefix = ""

    if path.startswith(separator):
        prefix = separator
    elif segments and ":" in segments[0]:
        prefix = segments.pop(0) + separator

    stack: list[str] = []
    for segment in segments:
        if segment in ("", "."):
            continue
        if segment == "..":
            if stack:
                stack.pop()
            continue
        stack.append(segment)

    return prefix + separator.join(stack)


def is_absolute_path(path: str) -> bool:
    """Return True for rooted paths ('/x', '\\x') and drive paths ('C:...')."""
    return path.startswith(("/", "\\")) or (len(path) > 1 and path[1] == ":")


def absolute_path(base_path: str, path: str, separator: str = os.sep) -> str:
    """Resolve *path* against *base_path* unless it is already absolute."""
    if is_absolute_path(path):
        return canonicalize_path(path, separator)
    return canonicalize_path(base_path + separator + path, separator)
