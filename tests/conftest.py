"""Shared sandbox fixtures: a fake host application tree under tmp_path."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest

from modorch.config import OrchestratorConfig
from sandbox import loose_record, package_record, settings_for, write_json


@pytest.fixture
def sandbox(tmp_path: Path) -> Path:
    """Base directory with one package module and one loose module."""
    base = tmp_path / "app"
    write_json(base / "vendor" / "composer" / "installed.json", {"packages": [package_record()]})
    (base / "vendor" / "foo-module").mkdir(parents=True)
    write_json(base / "modules" / "custom" / "module.json", loose_record())
    (base / "bootstrap" / "cache").mkdir(parents=True)
    return base


@pytest.fixture
def make_config(sandbox: Path) -> Callable[..., OrchestratorConfig]:
    """Factory building an OrchestratorConfig rooted at the sandbox."""

    def factory(**overrides: Any) -> OrchestratorConfig:
        return OrchestratorConfig(settings_for(sandbox, **overrides))

    return factory


@pytest.fixture
def config(make_config: Callable[..., OrchestratorConfig]) -> OrchestratorConfig:
    """Default sandbox configuration (auto install and auto enable on)."""
    return make_config()
