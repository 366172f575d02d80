"""Structured diagnostics: ContextLogger and the never-raising warning reporter."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

__all__ = ["ContextLogger", "report_warning"]

_LEVELS = {
    "trace": 0,
    "debug": 10,
    "info": 20,
    "warn": 30,
    "error": 40,
    "fatal": 50,
}


class ContextLogger:
    """Standalone structured logger writing one entry per line.

    Part of the public API (``modorch.ContextLogger``) for hosts that want
    JSON or text diagnostics without configuring stdlib logging. Inside the
    library it backs ``report_warning`` when the regular logger fails.

    Args:
        name: Logger name recorded on every entry.
        output_format: ``"json"`` or ``"text"``.
        level: Minimum level: trace, debug, info, warn, error or fatal.
        output: Writable stream, ``sys.stderr`` by default.
    """

    def __init__(
        self,
        name: str,
        output_format: str = "json",
        level: str = "info",
        output: Any = None,
    ) -> None:
        self._name = name
        self._output_format = output_format
        self._level = level
        self._level_value = _LEVELS.get(level, 20)
        self._output = output if output is not None else sys.stderr

    def _emit(self, level_name: str, message: str, extra: dict[str, Any] | None) -> None:
        level_value = _LEVELS.get(level_name, 20)
        if level_value < self._level_value:
            return

        now = datetime.now(timezone.utc)
        if self._output_format == "json":
            entry = {
                "timestamp": now.isoformat(),
                "level": level_name,
                "message": message,
                "logger": self._name,
                "extra": extra,
            }
            self._output.write(json.dumps(entry, default=str) + "\n")
        else:
            ts = now.strftime("%Y-%m-%d %H:%M:%S")
            extras_str = ""
            if extra:
                extras_str = " " + " ".join(f"{k}={v}" for k, v in extra.items())
            self._output.write(f"{ts} [{level_name.upper()}] [{self._name}] {message}{extras_str}\n")

    def trace(self, message: str, extra: dict[str, Any] | None = None) -> None:
        self._emit("trace", message, extra)

    def debug(self, message: str, extra: dict[str, Any] | None = None) -> None:
        self._emit("debug", message, extra)

    def info(self, message: str, extra: dict[str, Any] | None = None) -> None:
        self._emit("info", message, extra)

    def warn(self, message: str, extra: dict[str, Any] | None = None) -> None:
        self._emit("warn", message, extra)

    def error(self, message: str, extra: dict[str, Any] | None = None) -> None:
        self._emit("error", message, extra)

    def fatal(self, message: str, extra: dict[str, Any] | None = None) -> None:
        self._emit("fatal", message, extra)


_fallback = ContextLogger(name="modorch.fallback", level="warn")


def report_warning(
    logger: logging.Logger,
    message: str,
    context: dict[str, Any] | None = None,
    fallback: ContextLogger | None = None,
) -> None:
    """Log a discovery warning with structured context. Never raises.

    The entry goes to *logger* at WARNING level. If that fails, it is written
    through *fallback* (structured JSON on stderr by default); a failure
    there is dropped.
    """
    context = context or {}
    try:
        if context:
            logger.warning("%s %s", message, json.dumps(context, default=str, sort_keys=True))
        else:
            logger.warning("%s", message)
        return
    except Exception:  # noqa: BLE001
        pass

    try:
        (fallback or _fallback).warn(message, extra=context)
    except Exception:  # noqa: BLE001
        pass
