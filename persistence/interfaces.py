from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol


class DocumentBackend(Protocol):
    """
    Durable home of the single store document.
    """

    @property
    def path(self) -> Path: ...

    def load(self) -> Any:
        """Return the parsed document; raise StoreNotFound / CorruptStoreState."""
        ...

    def save(self, doc: dict[str, Any]) -> None:
        """Overwrite the stored document; raise StorePersistenceError on failure."""
        ...
