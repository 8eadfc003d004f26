from __future__ import annotations

from .contact_log import ContactLog
from .disk_store import DiskJsonDocumentStore
from .document import DEFAULT_DOCUMENT, DEFAULT_PROJECTS, ProjectRecord, StoreDocument, normalize
from .errors import (
    CorruptStoreState,
    StoreClosedError,
    StoreError,
    StoreNotFound,
    StorePersistenceError,
    StoreUpdateCancelled,
)
from .store import JsonDocumentStore
from .update_queue import SerializedUpdateQueue

__all__ = [
    "ContactLog",
    "DiskJsonDocumentStore",
    "DEFAULT_DOCUMENT",
    "DEFAULT_PROJECTS",
    "ProjectRecord",
    "StoreDocument",
    "normalize",
    "CorruptStoreState",
    "StoreClosedError",
    "StoreError",
    "StoreNotFound",
    "StorePersistenceError",
    "StoreUpdateCancelled",
    "JsonDocumentStore",
    "SerializedUpdateQueue",
]
