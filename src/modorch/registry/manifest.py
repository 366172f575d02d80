"""On-disk module manifest: the durable cache of module descriptors."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from typing import Any

from modorch.errors import ManifestWriteError

logger = logging.getLogger(__name__)

__all__ = ["ModuleManifest"]


class ModuleManifest:
    """JSON manifest mapping module id to its descriptor record.

    Holds no in-memory state: every ``load()`` re-reads the file.
    """

    def __init__(self, path: str) -> None:
        self._path = path

    @property
    def path(self) -> str:
        return self._path

    def exists(self) -> bool:
        return os.path.isfile(self._path)

    def load(self) -> list[dict[str, Any]]:
        """Return the stored records.

        A missing, unreadable or corrupt manifest yields an empty list.
        """
        if not self.exists():
            return []

        try:
            with open(self._path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable module manifest %s: %s", self._path, e)
            return []

        if isinstance(data, dict):
            records = list(data.values())
        elif isinstance(data, list):
            records = data
        else:
            return []
        return [record for record in records if isinstance(record, dict)]

    def write(self, records: dict[str, dict[str, Any]]) -> None:
        """Atomically replace the manifest with *records* (keyed by module id).

        Raises:
            ManifestWriteError: If the directory cannot be created or the
                file cannot be written.
        """
        directory = os.path.dirname(self._path) or "."
        try:
            os.makedirs(directory, exist_ok=True)
        except OSError as e:
            raise ManifestWriteError(
                manifest_path=self._path,
                reason=f"unable to create directory [{directory}]: {e}",
                cause=e,
            ) from e

        tmp: str | None = None
        try:
            fd, tmp = tempfile.mkstemp(prefix=".modules_", suffix=".json.tmp", dir=directory)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(records, f, indent=2, ensure_ascii=False, sort_keys=True)
                f.write("\n")
            os.replace(tmp, self._path)
            tmp = None
        except (OSError, TypeError, ValueError) as e:
            raise ManifestWriteError(manifest_path=self._path, reason=str(e), cause=e) from e
        finally:
            if tmp is not None and os.path.exists(tmp):
                os.remove(tmp)

    def delete(self) -> None:
        if self.exists():
            os.remove(self._path)
