"""Shared helpers."""

from modorch.utils.paths import absolute_path, canonicalize_path, is_absolute_path

__all__ = ["absolute_path", "canonicalize_path", "is_absolute_path"]
