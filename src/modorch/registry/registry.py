"""Central module registry: reconciles discovered modules with persisted state."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable

from modorch.errors import InvalidInputError, ModuleNotFoundError, ProviderUnavailableError
from modorch.observability import report_warning
from modorch.registry.types import ModuleDescriptor, SpecDescriptor

if TYPE_CHECKING:
    from modorch.config import OrchestratorConfig
    from modorch.registry.discovery import ModuleDiscovery
    from modorch.registry.manifest import ModuleManifest
    from modorch.registry.registrar import Registrar

logger = logging.getLogger(__name__)

__all__ = ["Registry"]


class Registry:
    """Owns the in-memory module and spec sets and their persisted manifest.

    On construction the registry loads the manifest; if it holds no modules
    a full ``refresh()`` is run. Every mutation is written back to the
    manifest before it returns.
    """

    def __init__(
        self,
        config: OrchestratorConfig,
        discovery: ModuleDiscovery,
        manifest: ModuleManifest,
        registrar: Registrar | None = None,
    ) -> None:
        """Initialize the Registry.

        Args:
            config: Resolved orchestrator settings.
            discovery: Discovery engine used by ``refresh()``.
            manifest: Durable store for module state.
            registrar: Host hook for module providers. Provider registration
                is skipped when omitted.
        """
        self._config = config
        self._discovery = discovery
        self._manifest = manifest
        self._registrar = registrar
        self._modules: dict[str, ModuleDescriptor] = {}
        self._specs: dict[str, SpecDescriptor] = {}
        self._registered_providers: set[str] = set()

        cached = self._load_cached_modules()
        if cached:
            self._modules = cached
        else:
            self.refresh()

    # ----- Accessors -----

    @property
    def config(self) -> OrchestratorConfig:
        return self._config

    @property
    def manifest(self) -> ModuleManifest:
        return self._manifest

    @property
    def count(self) -> int:
        return len(self._modules)

    @property
    def module_ids(self) -> list[str]:
        return sorted(self._modules)

    def is_cached(self) -> bool:
        return self._manifest.exists()

    # ----- Query Methods -----

    def all(self) -> list[ModuleDescriptor]:
        """Return every module, ordered by id."""
        return [self._modules[module_id] for module_id in sorted(self._modules)]

    def specs(self) -> list[SpecDescriptor]:
        """Return the build specs found by the last refresh, ordered by id."""
        return [self._specs[spec_id] for spec_id in sorted(self._specs)]

    def installed(self) -> list[ModuleDescriptor]:
        return [module for module in self.all() if module.installed]

    def enabled_modules(self) -> list[ModuleDescriptor]:
        return [module for module in self.all() if module.enabled]

    def get(self, module_id: str) -> ModuleDescriptor:
        """Look up a module by ID.

        Raises:
            ModuleNotFoundError: If the module is not registered.
        """
        module = self._modules.get(module_id)
        if module is None:
            raise ModuleNotFoundError(module_id=module_id)
        return module

    def has(self, module_id: str) -> bool:
        return module_id in self._modules

    def is_enabled(self, module_id: str) -> bool:
        return self.get(module_id).enabled

    def path(self, module_id: str, sub_path: str | None = None) -> str:
        return self.get(module_id).path(sub_path)

    # ----- Lifecycle -----

    def install(self, module_id: str) -> ModuleDescriptor:
        """Mark a module installed, enabling it too when auto-enable is on.

        Raises:
            ModuleNotFoundError: If the module is not registered.
            ManifestWriteError: If the manifest cannot be written.
        """
        module = self.get(module_id)

        def apply() -> None:
            module.mark_installed(True)
            if not module.enabled and self._config.auto_enable:
                module.mark_enabled(True)

        self._mutate(module, apply)
        self._register_providers(module)
        return module

    def uninstall(self, module_id: str) -> ModuleDescriptor:
        """Clear both flags. The module stays registered."""
        module = self.get(module_id)
        self._mutate(module, module.uninstall)
        return module

    def enable(self, module_id: str) -> ModuleDescriptor:
        """Enable an installed module.

        Enabling a module that is not installed leaves it disabled; the
        (unchanged) state is still persisted.
        """
        module = self.get(module_id)
        self._mutate(module, module.enable)
        self._register_providers(module)
        return module

    def disable(self, module_id: str) -> ModuleDescriptor:
        module = self.get(module_id)
        self._mutate(module, module.disable)
        return module

    def _mutate(self, module: ModuleDescriptor, change: Callable[[], None]) -> None:
        previous = (module.installed, module.enabled)
        change()
        try:
            self.persist()
        except Exception:
            module.installed, module.enabled = previous
            raise

    # ----- Discovery -----

    def refresh(self, write_manifest: bool = True) -> dict[str, ModuleDescriptor]:
        """Re-run discovery and reconcile it with the known module state.

        Installed/enabled flags already known for an id, in memory first and
        then from the manifest, override the defaults a source reports.
        Specs are replaced outright. Memory is only updated once the
        manifest write, if requested, has succeeded.

        Args:
            write_manifest: Persist the reconciled modules afterwards.

        Returns:
            The reconciled modules, ordered by id.
        """
        overrides: dict[str, tuple[bool, bool]] = {
            module_id: (module.installed, module.enabled) for module_id, module in self._modules.items()
        }

        for record in self._manifest.load():
            module_id = record.get("id")
            if not isinstance(module_id, str) or not module_id or module_id in overrides:
                continue
            overrides[module_id] = (
                bool(record.get("installed", self._config.auto_install)),
                bool(record.get("enabled", self._config.auto_enable)),
            )

        modules: dict[str, ModuleDescriptor] = {}
        for module_id, module in self._discovery.discover().items():
            override = overrides.get(module_id)
            if override is not None:
                module.mark_installed(override[0])
                module.mark_enabled(override[1])
            modules[module_id] = module

        ordered = {module_id: modules[module_id] for module_id in sorted(modules)}
        specs = {spec.id: spec for spec in self._discovery.discover_specs()}

        if write_manifest:
            self._write(ordered)

        self._modules = ordered
        self._specs = specs
        logger.debug("Refreshed registry: %d modules, %d specs", len(self._modules), len(self._specs))

        return dict(self._modules)

    # ----- Persistence -----

    def persist(self) -> None:
        """Write every module to the manifest."""
        self._write(self._modules)

    def _write(self, modules: dict[str, ModuleDescriptor]) -> None:
        self._manifest.write({module_id: modules[module_id].to_dict() for module_id in sorted(modules)})

    def clear(self) -> None:
        """Forget all modules and delete the manifest."""
        self._modules = {}
        self._manifest.delete()

    def _load_cached_modules(self) -> dict[str, ModuleDescriptor]:
        if not self._manifest.exists():
            return {}

        modules: dict[str, ModuleDescriptor] = {}
        for record in self._manifest.load():
            try:
                module = ModuleDescriptor.from_dict(record)
            except InvalidInputError:
                logger.debug("Skipping manifest record without an id: %r", record)
                continue
            modules[module.id] = module
        return modules

    # ----- Providers -----

    def register_enabled_modules(self) -> None:
        """Register the providers of every enabled module with the host."""
        for module in self.enabled_modules():
            self._register_providers(module)

    def _register_providers(self, module: ModuleDescriptor) -> None:
        if not module.enabled or self._registrar is None:
            return

        for provider in module.providers:
            if not provider or provider in self._registered_providers:
                continue

            context: dict[str, Any] = {"module": module.id, "provider": provider}
            try:
                registered = self._registrar.register(provider)
            except ProviderUnavailableError as e:
                context["reason"] = e.details.get("reason")
                registered = False
            except Exception as e:  # noqa: BLE001
                context["reason"] = f"{type(e).__name__}: {e}"
                registered = False

            if not registered:
                report_warning(logger, "Module provider class is missing.", context)
                continue

            self._registered_providers.add(provider)
