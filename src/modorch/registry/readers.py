"""Source readers that turn module metadata files into ModuleDescriptors."""

from __future__ import annotations

import glob
import logging
import os
from typing import TYPE_CHECKING, Any

from modorch.registry.metadata import (
    get_nested,
    normalize_paths,
    normalize_providers,
    normalize_strings,
    read_json,
)
from modorch.registry.types import ModuleDescriptor

if TYPE_CHECKING:
    from modorch.config import OrchestratorConfig

logger = logging.getLogger(__name__)

__all__ = ["PackageMetadataReader", "LooseMetadataReader"]


def _first_string(*values: Any, default: str = "") -> str:
    """Return the first non-empty string among *values*, else *default*."""
    for value in values:
        if isinstance(value, str) and value:
            return value
    return default


class PackageMetadataReader:
    """Read modules from a package manager's installed-packages file.

    The file may hold a single package record, a ``{"packages": [...]}``
    envelope, or a list of envelopes and/or package records. Only packages
    declaring the configured module package type, or carrying a non-empty
    module metadata block, become modules.
    """

    def __init__(self, config: OrchestratorConfig) -> None:
        self._config = config

    def read(self) -> list[ModuleDescriptor]:
        modules: list[ModuleDescriptor] = []
        for package in self._read_packages():
            module = self._to_descriptor(package)
            if module is not None:
                modules.append(module)
        return modules

    def _read_packages(self) -> list[dict[str, Any]]:
        data = read_json(self._config.installed_path)
        if data is None:
            return []

        if isinstance(data, dict):
            packages = data.get("packages")
            if isinstance(packages, list):
                return [p for p in packages if isinstance(p, dict)]
            if "name" in data:
                return [data]
            return []

        if not isinstance(data, list):
            return []

        result: list[dict[str, Any]] = []
        for entry in data:
            if not isinstance(entry, dict):
                continue
            packages = entry.get("packages")
            if isinstance(packages, list):
                result.extend(p for p in packages if isinstance(p, dict))
            elif "name" in entry:
                result.append(entry)
        return result

    def _to_descriptor(self, package: dict[str, Any]) -> ModuleDescriptor | None:
        meta = get_nested(package, self._config.module_metadata_key, {})
        if not isinstance(meta, dict):
            meta = {}

        if package.get("type") != self._config.module_package_type and not meta:
            return None

        module_id = _first_string(meta.get("id"), package.get("name"))
        if not module_id:
            logger.debug("Skipping package without a usable id: %r", package.get("name"))
            return None

        name = _first_string(meta.get("name"), package.get("name"), default=module_id)
        version = meta.get("version") or package.get("version") or package.get("pretty_version") or "0.0.0"
        return ModuleDescriptor(
            id=module_id,
            name=name,
            version=str(version),
            installed=self._config.auto_install,
            enabled=self._config.auto_enable,
            base_path=self._resolve_install_path(package),
            paths=normalize_paths(meta),
            providers=normalize_providers(get_nested(package, self._config.providers_key, [])),
            capabilities=normalize_strings(meta.get("capabilities", [])),
            extra=meta,
        )

    def _resolve_install_path(self, package: dict[str, Any]) -> str:
        path = package.get("install_path") or package.get("install-path")
        if isinstance(path, str) and path:
            metadata_dir = os.path.dirname(self._config.installed_path)
            candidate = self._config.canonicalize_path(metadata_dir + os.sep + path)
            if candidate:
                return candidate

        name = package.get("name")
        if isinstance(name, str) and name:
            return self._config.absolute_path("vendor/" + name)

        return self._config.base_path


class LooseMetadataReader:
    """Read standalone ``module.json`` style files matched by glob patterns."""

    def __init__(self, config: OrchestratorConfig) -> None:
        self._config = config

    def read(self) -> list[ModuleDescriptor]:
        modules: list[ModuleDescriptor] = []
        for pattern in self._config.module_json_patterns:
            for file_path in sorted(glob.glob(self._config.absolute_path(pattern))):
                module = self._read_file(file_path)
                if module is not None:
                    modules.append(module)
        return modules

    def _read_file(self, file_path: str) -> ModuleDescriptor | None:
        data = read_json(file_path)
        if not isinstance(data, dict):
            logger.debug("Skipping unreadable module metadata file %s", file_path)
            return None

        module_id = data.get("id")
        if not isinstance(module_id, str) or not module_id:
            logger.debug("Skipping module metadata file without an id: %s", file_path)
            return None

        return ModuleDescriptor(
            id=module_id,
            name=_first_string(data.get("name"), default=module_id),
            version=str(data.get("version") or "0.0.0"),
            installed=self._config.auto_install,
            enabled=self._config.auto_enable,
            base_path=self._config.canonicalize_path(os.path.dirname(file_path)),
            paths=normalize_paths(data),
            providers=normalize_providers(data.get("providers", [])),
            capabilities=normalize_strings(data.get("capabilities", [])),
            extra=data,
        )
