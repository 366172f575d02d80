"""Configuration loading, validation and path normalization."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Union

import yaml
from pydantic import BaseModel, ConfigDict, field_validator
from pydantic import ValidationError as PydanticValidationError

from modorch.errors import ConfigError, ConfigNotFoundError
from modorch.utils.paths import absolute_path, canonicalize_path

__all__ = ["Config", "OrchestratorConfig", "DEFAULT_MODULE_JSON_PATTERNS"]

DEFAULT_MODULE_JSON_PATTERNS = [
    "vendor/*/*/module.json",
    "modules/*/module.json",
    "packages/*/*/module.json",
]


class Config:
    """Configuration accessor with dot-path key support."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data or {}

    @classmethod
    def load(cls, yaml_path: str | Path) -> Config:
        """Load configuration from a YAML file.

        Raises:
            ConfigNotFoundError: If the file does not exist.
            ConfigError: If the YAML is invalid or is not a mapping.
        """
        path = Path(yaml_path)
        if not path.is_file():
            raise ConfigNotFoundError(config_path=str(path))

        content = path.read_text(encoding="utf-8")
        try:
            parsed = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(message=f"Invalid YAML in configuration file: {path}", cause=e) from e

        if parsed is None:
            return cls()
        if not isinstance(parsed, dict):
            raise ConfigError(message=f"Configuration file must be a YAML mapping: {path}")
        return cls(parsed)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by dot-path key."""
        parts = key.split(".")
        current: Any = self._data
        for part in parts:
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default
        return current


class _OrchestratorSettings(BaseModel):
    """Raw orchestrator settings before path resolution."""

    model_config = ConfigDict(extra="ignore", validate_default=True)

    base_path: str | None = None
    modules_default_path: str = "modules"
    manifest_path: str = "bootstrap/cache/modules.json"
    installed_path: str = "vendor/composer/installed.json"
    module_json_paths: Union[list[Any], str, None] = None
    module_specs_path: str = "specs/modules"
    default_vendor: str | None = None
    auto_install: bool = True
    auto_enable: bool = True
    module_package_type: str = "module"
    module_metadata_key: str = "extra.module"
    providers_key: str = "extra.providers"

    @field_validator("module_json_paths", mode="after")
    @classmethod
    def _normalize_patterns(cls, value: Any) -> list[str]:
        if isinstance(value, str):
            value = [value]
        result: list[str] = []
        for pattern in value or []:
            if isinstance(pattern, str) and pattern and pattern not in result:
                result.append(pattern)
        return result or list(DEFAULT_MODULE_JSON_PATTERNS)


class OrchestratorConfig:
    """Resolved orchestrator settings.

    All configured paths are made absolute against ``base_path`` at
    construction. When ``base_path`` is not configured the current working
    directory is used.

    Args:
        values: Raw settings mapping. Unknown keys are ignored.

    Raises:
        ConfigError: If a setting has an invalid type, or no base path can
            be determined.
    """

    def __init__(self, values: dict[str, Any] | None = None) -> None:
        try:
            settings = _OrchestratorSettings.model_validate(values or {})
        except PydanticValidationError as e:
            raise ConfigError(message=f"Invalid orchestrator configuration: {e}", cause=e) from e

        self._base_path = self._resolve_base_path(settings.base_path)
        self._modules_path = self.absolute_path(settings.modules_default_path)
        self._manifest_path = self.absolute_path(settings.manifest_path)
        self._installed_path = self.absolute_path(settings.installed_path)
        self._module_json_patterns: list[str] = list(settings.module_json_paths or [])
        self._module_specs_path = self.absolute_path(settings.module_specs_path)
        self._default_vendor = settings.default_vendor
        self._auto_install = settings.auto_install
        self._auto_enable = settings.auto_enable
        self._module_package_type = settings.module_package_type
        self._module_metadata_key = settings.module_metadata_key
        self._providers_key = settings.providers_key

    @classmethod
    def from_config(cls, config: Config, section: str = "orchestrator") -> OrchestratorConfig:
        """Build from the given section of a dot-path Config."""
        values = config.get(section, {})
        if not isinstance(values, dict):
            raise ConfigError(message=f"Configuration section '{section}' must be a mapping")
        return cls(values)

    @property
    def base_path(self) -> str:
        return self._base_path

    @property
    def modules_path(self) -> str:
        return self._modules_path

    @property
    def manifest_path(self) -> str:
        return self._manifest_path

    @property
    def installed_path(self) -> str:
        return self._installed_path

    @property
    def module_json_patterns(self) -> list[str]:
        return list(self._module_json_patterns)

    @property
    def module_specs_path(self) -> str:
        return self._module_specs_path

    @property
    def default_vendor(self) -> str | None:
        return self._default_vendor

    @property
    def auto_install(self) -> bool:
        return self._auto_install

    @property
    def auto_enable(self) -> bool:
        return self._auto_enable

    @property
    def module_package_type(self) -> str:
        return self._module_package_type

    @property
    def module_metadata_key(self) -> str:
        return self._module_metadata_key

    @property
    def providers_key(self) -> str:
        return self._providers_key

    def absolute_path(self, path: str) -> str:
        """Resolve *path* against the configured base path."""
        return absolute_path(self._base_path, path)

    def canonicalize_path(self, path: str) -> str:
        return canonicalize_path(path)

    @staticmethod
    def _resolve_base_path(configured: str | None) -> str:
        if configured:
            return canonicalize_path(configured)
        try:
            cwd = os.getcwd()
        except OSError as e:
            raise ConfigError(message="Unable to determine base path for the orchestrator", cause=e) from e
        return canonicalize_path(cwd)
