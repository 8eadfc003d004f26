from __future__ import annotations

from pathlib import Path


class StoreError(Exception):
    """Base class for document store errors."""


class StoreNotFound(StoreError):
    def __init__(self, path: Path):
        super().__init__(f"store file does not exist: {path}")
        self.path = path


class CorruptStoreState(StoreError):
    def __init__(self, path: Path, reason: str):
        super().__init__(f"store file {path} could not be parsed: {reason}")
        self.path = path
        self.reason = reason


class StorePersistenceError(StoreError):
    def __init__(self, path: Path, reason: str):
        super().__init__(f"failed to write store file {path}: {reason}")
        self.path = path
        self.reason = reason


class StoreClosedError(StoreError):
    pass


class StoreUpdateCancelled(StoreError):
    """A mutator raised CancelledError; reported to its caller as an ordinary failure."""
