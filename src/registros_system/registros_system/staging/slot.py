from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Optional, Protocol

from filelock import FileLock

from ..core.constants import STAGING_SLOT_KEY

logger = logging.getLogger(__name__)


class LocalSlot(Protocol):
    """Durable key-value slot that mirrors the staging cache."""

    def read(self) -> Optional[list[dict[str, Any]]]:
        raise NotImplementedError

    def write(self, items: list[dict[str, Any]]) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


class JsonFileSlot(LocalSlot):
    """One JSON file holding ``{key: [record, ...]}``.

    Writes go to a temp file in the same directory followed by os.replace,
    so readers see either the old set or the new one.
    """

    def __init__(self, path: str | Path, *, key: str = STAGING_SLOT_KEY):
        self._path = Path(path)
        self._key = key
        self._lock = FileLock(str(self._path) + ".lock")

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> Optional[list[dict[str, Any]]]:
        with self._lock:
            if not self._path.exists():
                return None
            try:
                payload = json.loads(self._path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as e:
                logger.warning("Ignoring unreadable staging slot %s: %s", self._path, e)
                return None

        items = payload.get(self._key) if isinstance(payload, dict) else None
        if not isinstance(items, list):
            return None
        return items

    def write(self, items: list[dict[str, Any]]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._lock:
            fd, tmp_name = tempfile.mkstemp(dir=str(self._path.parent), prefix=self._path.name, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump({self._key: items}, fh, ensure_ascii=False)
                    fh.flush()
                    os.fsync(fh.fileno())
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise

    def clear(self) -> None:
        with self._lock:
            self._path.unlink(missing_ok=True)
