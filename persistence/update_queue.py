from __future__ import annotations

import asyncio
import copy
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping, TypeVar, Union

from .document import DEFAULT_DOCUMENT, StoreDocument, default_document, normalize
from .errors import CorruptStoreState, StoreClosedError, StoreNotFound, StoreUpdateCancelled
from .interfaces import DocumentBackend

logger = logging.getLogger(__name__)

T = TypeVar("T")

# A mutator edits the draft in place and may return (or resolve to) a result for its caller.
Mutator = Callable[[StoreDocument], Union[T, None, Awaitable[Union[T, None]]]]


@dataclass
class _UpdateTask:
    mutator: Mutator[Any]
    future: asyncio.Future[Any]


_STOP = object()


class SerializedUpdateQueue:
    """
    In-memory cache of the store document plus a FIFO of pending mutations.

    One worker task drains the queue, so at most one mutation is in flight and every
    mutation sees the committed result of all mutations enqueued before it. Reads never
    wait on the queue: get() returns the last committed document, which may lag behind
    an update that is still running, but is never a half-mutated draft.
    """

    def __init__(self, backend: DocumentBackend, defaults: Mapping[str, Any] = DEFAULT_DOCUMENT):
        self._backend = backend
        self._defaults: dict[str, Any] = copy.deepcopy(dict(defaults))
        self._cache: StoreDocument | None = None
        self._init_lock = asyncio.Lock()
        self._queue: asyncio.Queue[Any] | None = None
        self._worker: asyncio.Task[None] | None = None
        self._closed = False

    @property
    def initialized(self) -> bool:
        return self._cache is not None

    @property
    def pending(self) -> int:
        return self._queue.qsize() if self._queue is not None else 0

    async def ensure_initialized(self) -> None:
        if self._cache is not None:
            return
        async with self._init_lock:
            if self._cache is not None:
                return
            self._cache = await self._load_or_create()

    async def _load_or_create(self) -> StoreDocument:
        try:
            raw = await asyncio.to_thread(self._backend.load)
        except StoreNotFound:
            logger.info("Store file %s not found, creating it with defaults", self._backend.path)
        except CorruptStoreState as e:
            logger.warning("Failed to read store file, recreating with defaults: %s", e)
        else:
            return normalize(raw, self._defaults)

        doc = default_document(self._defaults)
        await asyncio.to_thread(self._backend.save, doc)
        return doc

    async def get(self) -> StoreDocument:
        await self.ensure_initialized()
        return copy.deepcopy(self._cache)  # type: ignore[return-value]

    async def update(self, mutator: Mutator[T]) -> T | StoreDocument:
        if self._closed:
            raise StoreClosedError("store is closed")
        await self.ensure_initialized()
        # no await between this check and put_nowait, so a task can't land behind _STOP
        if self._closed:
            raise StoreClosedError("store is closed")

        queue = self._ensure_worker()
        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        queue.put_nowait(_UpdateTask(mutator, future))
        return await future

    async def start(self) -> None:
        if self._closed:
            raise StoreClosedError("store is closed")
        await self.ensure_initialized()
        self._ensure_worker()

    async def aclose(self) -> None:
        """Let every queued update finish, then stop the worker."""
        if self._closed:
            return
        self._closed = True
        worker = self._worker
        if self._queue is not None and worker is not None and not worker.done():
            self._queue.put_nowait(_STOP)
            await worker
        self._worker = None

    def _ensure_worker(self) -> asyncio.Queue[Any]:
        if self._queue is None:
            self._queue = asyncio.Queue()
        if self._worker is None or self._worker.done():
            self._worker = asyncio.create_task(self._drain(self._queue), name="store-update-worker")
        return self._queue

    async def _drain(self, queue: asyncio.Queue[Any]) -> None:
        while True:
            item = await queue.get()
            try:
                if item is _STOP:
                    return
                await self._run(item)
            finally:
                queue.task_done()

    async def _run(self, task: _UpdateTask) -> None:
        try:
            result = await self._apply(task.mutator)
        except asyncio.CancelledError as e:
            worker = asyncio.current_task()
            if worker is not None and worker.cancelling():
                # The worker itself is being cancelled: fail the caller, then stop.
                self._fail(task, StoreClosedError("store worker was cancelled"))
                raise
            # Raised by the mutator; the worker keeps draining.
            logger.error("Store update cancelled by its mutator")
            failure = StoreUpdateCancelled("update was cancelled by its mutator")
            failure.__cause__ = e
            self._fail(task, failure)
            return
        except Exception as e:
            logger.exception("Store update failed")
            self._fail(task, e)
            return
        if not task.future.done():
            task.future.set_result(result)

    def _fail(self, task: _UpdateTask, error: BaseException) -> None:
        if self._cache is None:
            self._cache = default_document(self._defaults)
        # The caller may have stopped waiting; the update still ran to completion.
        if not task.future.done():
            task.future.set_exception(error)

    async def _apply(self, mutator: Mutator[Any]) -> Any:
        draft = copy.deepcopy(self._cache)
        result = mutator(draft)  # type: ignore[arg-type]
        if inspect.isawaitable(result):
            result = await result

        # Committed before the write: if saving fails the cache is ahead of the file.
        self._cache = normalize(draft, self._defaults)
        await asyncio.to_thread(self._backend.save, self._cache)
        return result if result is not None else copy.deepcopy(self._cache)
