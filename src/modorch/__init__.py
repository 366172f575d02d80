"""modorch - Module discovery, state reconciliation and manifest persistence."""

from __future__ import annotations

# Core
from modorch.bootstrap import create_registry
from modorch.registry import (
    CallbackRegistrar,
    LooseMetadataReader,
    ModuleDiscovery,
    ModuleManifest,
    PackageMetadataReader,
    Registrar,
    Registry,
)
from modorch.registry.types import ModuleDescriptor, SpecDescriptor

# Config
from modorch.config import Config, OrchestratorConfig

# Errors
from modorch.errors import (
    ConfigError,
    ConfigNotFoundError,
    ErrorCodes,
    InvalidInputError,
    ManifestWriteError,
    ModuleError,
    ModuleNotFoundError,
    ProviderUnavailableError,
)

# Paths
from modorch.utils.paths import absolute_path, canonicalize_path

# Observability
from modorch.observability import ContextLogger, report_warning

__version__ = "0.1.0"

__all__ = [
    # Core
    "Registry",
    "create_registry",
    "ModuleDiscovery",
    "ModuleManifest",
    "PackageMetadataReader",
    "LooseMetadataReader",
    "Registrar",
    "CallbackRegistrar",
    # Types
    "ModuleDescriptor",
    "SpecDescriptor",
    # Config
    "Config",
    "OrchestratorConfig",
    # Errors
    "ErrorCodes",
    "ModuleError",
    "ConfigError",
    "ConfigNotFoundError",
    "InvalidInputError",
    "ManifestWriteError",
    "ModuleNotFoundError",
    "ProviderUnavailableError",
    # Paths
    "absolute_path",
    "canonicalize_path",
    # Observability
    "ContextLogger",
    "report_warning",
]
