"""Host registrars: hand module provider identifiers to the host application."""

from __future__ import annotations

import importlib
import logging
from typing import Any, Callable, Protocol, runtime_checkable

from modorch.errors import ProviderUnavailableError

logger = logging.getLogger(__name__)

__all__ = ["Registrar", "CallbackRegistrar", "resolve_provider"]

_MISSING = object()


@runtime_checkable
class Registrar(Protocol):
    """Capability for registering a module provider with the host.

    ``register`` returns False, or raises ProviderUnavailableError, when the
    identifier cannot be resolved in this host.
    """

    def register(self, identifier: str) -> bool: ...


def resolve_provider(identifier: str) -> Any:
    """Import the object named by *identifier*.

    Accepts ``package.module:Attr`` or ``package.module.Attr``.

    Raises:
        ProviderUnavailableError: If the module or attribute cannot be found.
    """
    if ":" in identifier:
        module_path, _, attr_path = identifier.partition(":")
    else:
        module_path, _, attr_path = identifier.rpartition(".")

    if not module_path or not attr_path:
        raise ProviderUnavailableError(provider=identifier, reason="identifier is not an importable path")

    try:
        loaded = importlib.import_module(module_path)
    except ImportError as e:
        raise ProviderUnavailableError(provider=identifier, reason=f"cannot import '{module_path}'", cause=e) from e

    target: Any = loaded
    for part in attr_path.split("."):
        target = getattr(target, part, _MISSING)
        if target is _MISSING:
            raise ProviderUnavailableError(
                provider=identifier,
                reason=f"'{attr_path}' not found in '{module_path}'",
            )
    return target


class CallbackRegistrar:
    """Registrar that resolves identifiers by import and passes them to a callback.

    Args:
        callback: Host hook receiving the resolved provider object.
    """

    def __init__(self, callback: Callable[[Any], Any]) -> None:
        self._callback = callback

    def register(self, identifier: str) -> bool:
        try:
            provider = resolve_provider(identifier)
        except ProviderUnavailableError as e:
            logger.debug("%s", e)
            return False
        self._callback(provider)
        return True
