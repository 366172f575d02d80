"""modorch registry: module discovery, reconciliation and persistence.

Usage::

    from modorch.registry import ModuleDiscovery, ModuleManifest, Registry
    from modorch.config import OrchestratorConfig

    config = OrchestratorConfig({"base_path": "/srv/app"})
    registry = Registry(config, ModuleDiscovery(config), ModuleManifest(config.manifest_path))
    registry.disable("vendor/foo")
"""

from __future__ import annotations

from modorch.registry.discovery import ModuleDiscovery
from modorch.registry.manifest import ModuleManifest
from modorch.registry.metadata import normalize_paths, normalize_providers, normalize_strings, read_json
from modorch.registry.readers import LooseMetadataReader, PackageMetadataReader
from modorch.registry.registrar import CallbackRegistrar, Registrar, resolve_provider
from modorch.registry.registry import Registry
from modorch.registry.types import PATH_KEYS, ModuleDescriptor, SpecDescriptor

__all__ = [
    "PATH_KEYS",
    "CallbackRegistrar",
    "LooseMetadataReader",
    "ModuleDescriptor",
    "ModuleDiscovery",
    "ModuleManifest",
    "PackageMetadataReader",
    "Registrar",
    "Registry",
    "SpecDescriptor",
    "normalize_paths",
    "normalize_providers",
    "normalize_strings",
    "read_json",
    "resolve_provider",
]
