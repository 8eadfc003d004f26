from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from json_store import read_json, write_json

from .errors import CorruptStoreState, StoreNotFound, StorePersistenceError
from .interfaces import DocumentBackend
from .paths import ensure_dir


class DiskJsonDocumentStore(DocumentBackend):
    """
    Stores a single JSON document on disk at a fixed path.

    - load() distinguishes a missing file (StoreNotFound) from unparsable content
      (CorruptStoreState); an empty file counts as corrupt.
    - save() overwrites in place, pretty-printed. It is not atomic.
    """

    def __init__(self, path: Path):
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Any:
        ensure_dir(self._path.parent)
        try:
            return read_json(self._path)
        except FileNotFoundError as e:
            raise StoreNotFound(self._path) from e
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise CorruptStoreState(self._path, str(e)) from e

    def save(self, doc: dict[str, Any]) -> None:
        try:
            ensure_dir(self._path.parent)
            write_json(self._path, doc)
        except (OSError, TypeError, ValueError) as e:
            raise StorePersistenceError(self._path, repr(e)) from e
