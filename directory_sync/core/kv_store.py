"""Durable key-value files holding string and integer values."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from loguru import logger as log

from directory_sync.core.errors import PersistenceError


class JsonFileStore:
    """A single JSON document used as a flat key-value namespace.

    Every mutation rewrites the whole document through a temporary file and
    ``os.replace`` so readers see either the previous or the new document,
    never a partial one. Keys written in one :meth:`write` call therefore
    change together.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}

        try:
            with self.path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as exc:
            raise PersistenceError(
                f"Unable to read {self.path.name}: {exc}",
                path=str(self.path),
                operation="read",
            ) from exc

        if not isinstance(payload, dict):
            raise PersistenceError(
                f"{self.path.name} does not hold a JSON object",
                path=str(self.path),
                operation="read",
            )
        return payload

    def _replace(self, payload: Dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=f"{self.path.stem}_", suffix=".json", dir=self.path.parent)
        except OSError as exc:
            raise PersistenceError(
                f"Unable to prepare write of {self.path.name}: {exc}",
                path=str(self.path),
                operation="write",
            ) from exc

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp_file:
                json.dump(payload, tmp_file, indent=2, sort_keys=True)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as exc:
            raise PersistenceError(
                f"Unable to write {self.path.name}: {exc}",
                path=str(self.path),
                operation="write",
            ) from exc
        finally:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)

    def get_str(self, key: str, default: Optional[str] = None) -> Optional[str]:
        value = self._read().get(key)
        if value is None:
            return default
        return str(value)

    def get_int(self, key: str, default: int = 0) -> int:
        value = self._read().get(key)
        if value is None:
            return default
        try:
            return int(value)
        except (TypeError, ValueError) as exc:
            raise PersistenceError(
                f"Key {key!r} in {self.path.name} is not an integer",
                path=str(self.path),
                operation="read",
            ) from exc

    def _read_for_update(self) -> Tuple[Dict[str, Any], bool]:
        """Current document for a mutation; an unreadable one is replaced, not merged."""
        try:
            return self._read(), False
        except PersistenceError as exc:
            log.warning(f"Overwriting unreadable {self.path.name}: {exc.message}")
            return {}, True

    def write(self, values: Mapping[str, Any]) -> None:
        """Merge ``values`` into the document in one atomic replace."""
        payload, _ = self._read_for_update()
        payload.update(values)
        self._replace(payload)

    def remove(self, *keys: str) -> None:
        payload, corrupt = self._read_for_update()
        if not corrupt and not any(key in payload for key in keys):
            return
        for key in keys:
            payload.pop(key, None)
        self._replace(payload)

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            return
        except OSError as exc:
            raise PersistenceError(
                f"Unable to delete {self.path.name}: {exc}",
                path=str(self.path),
                operation="clear",
            ) from exc


__all__ = ["JsonFileStore"]
