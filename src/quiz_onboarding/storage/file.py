"""
JSON file key-value store

Keeps every key in a single JSON object on disk. Each write rewrites the
whole file through a temp file and os.replace, so a reader sees either the
old or the new object.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Optional, Union

from ..errors import StorageFailure
from .base import KeyValueStore

logger = logging.getLogger(__name__)


class JsonFileStore(KeyValueStore):
    """File-backed key-value store."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()

    def _read(self) -> dict:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise StorageFailure(f"Could not read {self.path}: {e}") from e

        if not raw.strip():
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageFailure(f"Corrupt store file {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise StorageFailure(f"Corrupt store file {self.path}: expected an object")
        return data

    def _write(self, data: dict) -> None:
        try:
            content = json.dumps(data, indent=2)
        except (TypeError, ValueError) as e:
            raise StorageFailure(f"Value is not serializable: {e}") from e

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(content)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageFailure(f"Could not write {self.path}: {e}") from e

        logger.debug(f"Wrote {len(data)} keys to {self.path}")

    def get(self, key: str) -> Optional[Any]:
        return self._read().get(key)

    def set(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(path={str(self.path)!r})"
