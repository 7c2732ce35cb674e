"""
Document store interface shared by the Firestore and in-memory backends.
"""
import asyncio
from typing import Callable, Optional

from escola.errors import SubscriptionError
from escola.types import Document, Snapshot

_CLOSED = object()


class StoreError(Exception):
    """Raised by a store backend when the underlying client call fails."""

    def __init__(self, message, operation=None):
        self.message = message
        self.operation = operation
        super().__init__(self.message)


class Subscription:
    """
    Async iterator over full snapshots of one collection.

    Every item is the complete listing of the collection, never a diff.
    A failed listener is raised as SubscriptionError; the iterator stops
    after close(). close() releases the listener and may be called twice.
    """

    def __init__(self, on_close: Optional[Callable[[], None]] = None):
        self._queue: asyncio.Queue = asyncio.Queue()
        self._on_close = on_close
        self.closed = False

    def push(self, snapshot: Snapshot) -> None:
        if not self.closed:
            self._queue.put_nowait(snapshot)

    def push_error(self, error: BaseException) -> None:
        if not self.closed:
            self._queue.put_nowait(error)

    def __aiter__(self):
        return self

    async def __anext__(self) -> Snapshot:
        if self.closed:
            raise StopAsyncIteration
        item = await self._next_item()
        if item is _CLOSED:
            raise StopAsyncIteration
        if isinstance(item, BaseException):
            raise SubscriptionError("Erro de conexão com a base de dados") from item
        return item

    async def _next_item(self):
        return await self._queue.get()

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._queue.put_nowait(_CLOSED)
        if self._on_close:
            self._on_close()


class DocumentStore:
    """One collection of a document database."""

    collection: str

    async def list_documents(self) -> Snapshot:
        raise NotImplementedError

    async def get(self, doc_id: str) -> Optional[Document]:
        raise NotImplementedError

    async def add(self, data: dict) -> str:
        """Create a document with a store-assigned id and return the id."""
        raise NotImplementedError

    async def update(self, doc_id: str, data: dict) -> None:
        """Set the given fields of an existing document."""
        raise NotImplementedError

    async def delete(self, doc_id: str) -> None:
        raise NotImplementedError

    async def delete_many(self, doc_ids: list[str]) -> None:
        """Delete all documents in one atomic batch: all or none."""
        raise NotImplementedError

    async def subscribe(self) -> Subscription:
        raise NotImplementedError
