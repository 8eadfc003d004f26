from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, TypeVar

from .disk_store import DiskJsonDocumentStore
from .document import DEFAULT_DOCUMENT, StoreDocument
from .update_queue import Mutator, SerializedUpdateQueue

T = TypeVar("T")


class JsonDocumentStore:
    """
    The one JSON document this service keeps: counters plus the project list.

    Owned by the application (see app.create_app) and handed to request handlers;
    initialization is lazy, so callers can use get()/update() without a startup step.
    """

    def __init__(self, path: Path, defaults: Mapping[str, Any] = DEFAULT_DOCUMENT):
        self._backend = DiskJsonDocumentStore(path)
        self._queue = SerializedUpdateQueue(self._backend, defaults)

    @property
    def path(self) -> Path:
        return self._backend.path

    @property
    def pending_updates(self) -> int:
        return self._queue.pending

    async def get(self) -> StoreDocument:
        return await self._queue.get()

    async def update(self, mutator: Mutator[T]) -> T | StoreDocument:
        return await self._queue.update(mutator)

    async def start(self) -> None:
        await self._queue.start()

    async def aclose(self) -> None:
        await self._queue.aclose()
