"""Composition root: wires config, discovery, manifest and registry together."""

from __future__ import annotations

from typing import Any

from modorch.config import Config, OrchestratorConfig
from modorch.registry.discovery import ModuleDiscovery
from modorch.registry.manifest import ModuleManifest
from modorch.registry.registrar import Registrar
from modorch.registry.registry import Registry

__all__ = ["create_registry"]


def create_registry(
    config: OrchestratorConfig | Config | dict[str, Any] | None = None,
    registrar: Registrar | None = None,
) -> Registry:
    """Build a Registry from configuration.

    Args:
        config: Resolved settings, a dot-path Config (read from its
            ``orchestrator`` section), a raw settings mapping, or None for
            defaults.
        registrar: Optional host hook for module providers.
    """
    if isinstance(config, OrchestratorConfig):
        settings = config
    elif isinstance(config, Config):
        settings = OrchestratorConfig.from_config(config)
    else:
        settings = OrchestratorConfig(config)

    return Registry(
        config=settings,
        discovery=ModuleDiscovery(settings),
        manifest=ModuleManifest(settings.manifest_path),
        registrar=registrar,
    )
