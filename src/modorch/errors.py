"""Error hierarchy for the modorch module registry."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

__all__ = [
    "ModuleError",
    "ConfigNotFoundError",
    "ConfigError",
    "InvalidInputError",
    "ModuleNotFoundError",
    "ManifestWriteError",
    "ProviderUnavailableError",
    "ErrorCodes",
]


class ModuleError(Exception):
    """Base error for all modorch errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details: dict[str, Any] = details or {}
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc).isoformat()

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ConfigNotFoundError(ModuleError):
    """Raised when a configuration file cannot be found."""

    def __init__(self, config_path: str, **kwargs: Any) -> None:
        super().__init__(
            code="CONFIG_NOT_FOUND",
            message=f"Configuration file not found: {config_path}",
            details={"config_path": config_path},
            **kwargs,
        )


class ConfigError(ModuleError):
    """Raised when configuration is invalid."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(code="CONFIG_INVALID", message=message, **kwargs)


class InvalidInputError(ModuleError):
    """Raised for invalid input."""

    def __init__(self, message: str = "Invalid input", **kwargs: Any) -> None:
        super().__init__(code="GENERAL_INVALID_INPUT", message=message, **kwargs)


class ModuleNotFoundError(ModuleError):
    """Raised when an operation references a module id the registry does not know."""

    def __init__(self, module_id: str, **kwargs: Any) -> None:
        super().__init__(
            code="MODULE_NOT_FOUND",
            message=f"Module [{module_id}] is not registered in the module manifest",
            details={"module_id": module_id},
            **kwargs,
        )

    @property
    def module_id(self) -> str:
        """The unknown module ID."""
        return self.details["module_id"]


class ManifestWriteError(ModuleError):
    """Raised when the module manifest cannot be written to disk."""

    def __init__(self, manifest_path: str, reason: str, **kwargs: Any) -> None:
        super().__init__(
            code="MANIFEST_WRITE_ERROR",
            message=f"Unable to write module manifest [{manifest_path}]: {reason}",
            details={"manifest_path": manifest_path, "reason": reason},
            **kwargs,
        )

    @property
    def manifest_path(self) -> str:
        """The manifest path that could not be written."""
        return self.details["manifest_path"]


class ProviderUnavailableError(ModuleError):
    """Raised by a registrar when a provider identifier cannot be resolved."""

    def __init__(self, provider: str, reason: str = "provider is not available", **kwargs: Any) -> None:
        super().__init__(
            code="PROVIDER_UNAVAILABLE",
            message=f"Provider '{provider}' could not be registered: {reason}",
            details={"provider": provider, "reason": reason},
            **kwargs,
        )

    @property
    def provider(self) -> str:
        """The provider identifier that failed to resolve."""
        return self.details["provider"]


class ErrorCodes:
    """All modorch error codes as constants.

    Use these instead of hardcoding error code strings.

    Example:
        if error.code == ErrorCodes.MODULE_NOT_FOUND:
            handle_not_found()
    """

    CONFIG_NOT_FOUND = "CONFIG_NOT_FOUND"
    CONFIG_INVALID = "CONFIG_INVALID"
    MODULE_NOT_FOUND = "MODULE_NOT_FOUND"
    MANIFEST_WRITE_ERROR = "MANIFEST_WRITE_ERROR"
    PROVIDER_UNAVAILABLE = "PROVIDER_UNAVAILABLE"
    GENERAL_INVALID_INPUT = "GENERAL_INVALID_INPUT"

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("ErrorCodes is immutable")
