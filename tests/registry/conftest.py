"""Fixtures for the registry test suite."""

from __future__ import annotations

from typing import Any, Callable

import pytest

from modorch.config import OrchestratorConfig
from modorch.registry.discovery import ModuleDiscovery
from modorch.registry.manifest import ModuleManifest
from modorch.registry.registry import Registry
from sandbox import RecordingRegistrar


@pytest.fixture
def registrar() -> RecordingRegistrar:
    return RecordingRegistrar()


@pytest.fixture
def make_registry(
    make_config: Callable[..., OrchestratorConfig],
) -> Callable[..., Registry]:
    """Factory building a Registry over the sandbox with explicit wiring."""

    def factory(registrar: Any = None, **overrides: Any) -> Registry:
        config = make_config(**overrides)
        return Registry(
            config=config,
            discovery=ModuleDiscovery(config),
            manifest=ModuleManifest(config.manifest_path),
            registrar=registrar,
        )

    return factory
