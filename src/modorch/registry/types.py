"""Registry types: ModuleDescriptor, SpecDescriptor."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any

from modorch.errors import InvalidInputError

__all__ = [
    "ModuleDescriptor",
    "SpecDescriptor",
    "PATH_KEYS",
]

PATH_KEYS = ("routes", "migrations", "seeds", "views", "translations")


def _string_list(values: Any) -> list[str]:
    if not isinstance(values, (list, tuple)):
        return []
    return [value for value in values if isinstance(value, str) and value]


@dataclass
class ModuleDescriptor:
    """One discovered module and its lifecycle flags.

    ``enabled`` can only be true while ``installed`` is true: the flag is
    collapsed at construction and by every mutator.
    """

    id: str
    name: str
    version: str
    installed: bool
    enabled: bool
    base_path: str
    paths: dict[str, Any] = field(default_factory=dict)
    providers: list[str] = field(default_factory=list)
    capabilities: list[str] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.id:
            raise InvalidInputError(message="Module id must be a non-empty string")
        self.installed = bool(self.installed)
        self.enabled = bool(self.enabled) and self.installed

    # ----- Lifecycle -----

    def mark_installed(self, installed: bool) -> None:
        self.installed = bool(installed)
        if not self.installed:
            self.enabled = False

    def mark_enabled(self, enabled: bool) -> None:
        """Set the enabled flag. Has no effect on an uninstalled module."""
        self.enabled = bool(enabled) and self.installed

    def enable(self) -> None:
        self.mark_enabled(True)

    def disable(self) -> None:
        self.mark_enabled(False)

    def uninstall(self) -> None:
        self.installed = False
        self.enabled = False

    # ----- Filesystem -----

    def path(self, sub_path: str | None = None) -> str:
        """Return the base path, or *sub_path* joined onto it."""
        if not sub_path:
            return self.base_path
        return self.base_path.rstrip(os.sep) + os.sep + sub_path.lstrip(os.sep)

    def base_path_exists(self) -> bool:
        return self.base_path != "" and os.path.isdir(self.base_path)

    def health_status(self) -> str:
        if not self.installed:
            return "not installed"
        if not self.base_path_exists():
            return "missing files"
        if not self.enabled:
            return "disabled"
        return "healthy"

    def is_healthy(self) -> bool:
        return self.health_status() == "healthy"

    # ----- Serialization -----

    def to_dict(self) -> dict[str, Any]:
        """Return the manifest record for this descriptor."""
        return {
            "id": self.id,
            "name": self.name,
            "version": self.version,
            "installed": self.installed,
            "enabled": self.enabled,
            "base_path": self.base_path,
            "paths": dict(self.paths),
            "providers": list(self.providers),
            "capabilities": list(self.capabilities),
            "extra": dict(self.extra),
        }

    @classmethod
    def from_dict(cls, record: dict[str, Any]) -> ModuleDescriptor:
        """Rebuild a descriptor from a manifest record.

        Missing attributes fall back to: name = id, version "0.0.0",
        installed True, enabled = installed, empty base path.

        Raises:
            InvalidInputError: If the record has no usable id.
        """
        module_id = record.get("id")
        if not isinstance(module_id, str) or not module_id:
            raise InvalidInputError(message="Manifest record is missing a module id")

        installed = bool(record.get("installed", True))
        name = record.get("name")
        version = record.get("version")
        base_path = record.get("base_path")
        paths = record.get("paths")
        extra = record.get("extra")
        return cls(
            id=module_id,
            name=name if isinstance(name, str) else module_id,
            version=version if isinstance(version, str) else "0.0.0",
            installed=installed,
            enabled=bool(record.get("enabled", installed)),
            base_path=base_path if isinstance(base_path, str) else "",
            paths=paths if isinstance(paths, dict) else {},
            providers=_string_list(record.get("providers", [])),
            capabilities=_string_list(record.get("capabilities", [])),
            extra=extra if isinstance(extra, dict) else {},
        )


@dataclass(frozen=True)
class SpecDescriptor:
    """A standalone build specification awaiting generation."""

    id: str
    name: str
    namespace: str
    config_path: str
    is_enabled: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "namespace": self.namespace,
            "config_path": self.config_path,
            "is_enabled": self.is_enabled,
        }

    def __str__(self) -> str:
        return f"{self.name} ({self.id}), Namespace: {self.namespace}, Config: {self.config_path}"
