"""Discovery engine: merges module sources and scans build specs."""

from __future__ import annotations

import glob
import logging
import os
from typing import TYPE_CHECKING, Any

from modorch.observability import report_warning
from modorch.registry.metadata import read_json, studly
from modorch.registry.readers import LooseMetadataReader, PackageMetadataReader
from modorch.registry.types import ModuleDescriptor, SpecDescriptor

if TYPE_CHECKING:
    from modorch.config import OrchestratorConfig

logger = logging.getLogger(__name__)

__all__ = ["ModuleDiscovery"]


class ModuleDiscovery:
    """Gather modules from package metadata and loose metadata files.

    Package metadata wins when both sources declare the same id.
    """

    def __init__(
        self,
        config: OrchestratorConfig,
        package_reader: PackageMetadataReader | None = None,
        loose_reader: LooseMetadataReader | None = None,
    ) -> None:
        self._config = config
        self._package_reader = package_reader if package_reader is not None else PackageMetadataReader(config)
        self._loose_reader = loose_reader if loose_reader is not None else LooseMetadataReader(config)

    def discover(self) -> dict[str, ModuleDescriptor]:
        """Run both readers and return the merged modules ordered by id."""
        modules: dict[str, ModuleDescriptor] = {}

        for module in self._package_reader.read():
            if module.id in modules:
                logger.debug("Duplicate package module id '%s', keeping the first", module.id)
                continue
            modules[module.id] = module

        for module in self._loose_reader.read():
            if module.id in modules:
                logger.debug("Module '%s' already provided by package metadata", module.id)
                continue
            modules[module.id] = module

        return {module_id: modules[module_id] for module_id in sorted(modules)}

    def discover_specs(self) -> list[SpecDescriptor]:
        """Scan the specs directory for ``*.json`` build specs.

        Files that cannot be parsed or lack required fields are skipped with
        a warning, as are specs marked ``"disabled": true``. The vendor comes
        from ``app.vendor``, else the configured default vendor; a vendor
        prefix inside ``app.name`` only affects the short name.
        """
        specs: list[SpecDescriptor] = []
        pattern = os.path.join(self._config.module_specs_path, "*.json")
        for file_path in sorted(glob.glob(pattern)):
            spec = self._read_spec(file_path)
            if spec is not None:
                specs.append(spec)
        return sorted(specs, key=lambda spec: spec.id)

    def _read_spec(self, file_path: str) -> SpecDescriptor | None:
        data = read_json(file_path)
        if not isinstance(data, dict):
            self._warn("Skipping invalid module spec: unable to decode JSON.", file_path)
            return None

        app: Any = data.get("app")
        if isinstance(app, dict) and app.get("disabled") is True:
            self._warn("Skipping disabled module spec.", file_path)
            return None

        if not isinstance(app, dict):
            self._warn("Skipping invalid module spec: missing app section.", file_path)
            return None

        name = app.get("name")
        if not isinstance(name, str) or not name:
            self._warn("Skipping invalid module spec: missing or empty app.name.", file_path)
            return None

        vendor = app.get("vendor")
        if not vendor:
            vendor = self._config.default_vendor
        if not isinstance(vendor, str) or not vendor:
            self._warn("Skipping module spec because vendor could not be determined.", file_path)
            return None

        short_name = name.split("/")[-1]
        if not short_name:
            self._warn("Skipping invalid module spec: module name could not be determined.", file_path)
            return None

        return SpecDescriptor(
            id=f"{vendor.lower()}/{short_name.lower()}",
            name=name,
            namespace=vendor + "\\" + studly(short_name),
            config_path=file_path,
        )

    def _warn(self, message: str, file_path: str) -> None:
        report_warning(logger, message, {"file": file_path})
