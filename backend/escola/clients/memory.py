"""
In-memory document store - bypasses Firestore for local runs and testing
"""
import copy
import logging
import secrets
import string
from datetime import datetime, timezone
from typing import Optional

from google.cloud import firestore

from escola.clients.base import DocumentStore, StoreError, Subscription
from escola.types import Document, Snapshot

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_letters + string.digits


def generate_document_id(length: int = 20) -> str:
  """Generate an id shaped like a Firestore auto id."""
  return ''.join(secrets.choice(_ID_ALPHABET) for _ in range(length))


def _resolve_timestamps(data: dict) -> dict:
  now = datetime.now(timezone.utc)
  return {k: (now if v is firestore.SERVER_TIMESTAMP else v) for k, v in data.items()}


class MemoryStore(DocumentStore):
  """Dict-backed collection with realtime snapshots.

  Every write pushes the full collection to every open subscription, the
  way a Firestore listener does. Failures can be injected:

  Attributes:
      fail_operations: Operation names ("add", "update", "delete",
          "delete_many", "list", "get") that raise StoreError.
      fail_ids: Document ids whose update/delete raises StoreError. A batch
          containing one of them fails as a whole.
      writes: Every successful write as (operation, doc_id, data).
  """

  def __init__(self, collection: str, documents: Optional[Snapshot] = None):
    self.collection = collection
    self._docs: dict[str, dict] = {}
    self._subscriptions: list[Subscription] = []
    self.fail_operations: set[str] = set()
    self.fail_ids: set[str] = set()
    self.writes: list[tuple] = []
    for document in documents or []:
      data = dict(document)
      doc_id = data.pop("id", None) or generate_document_id()
      self._docs[doc_id] = data

  # ==================== FAILURE INJECTION ====================

  def _check(self, operation: str, doc_ids=()) -> None:
    if operation in self.fail_operations:
      raise StoreError(f"{operation} on {self.collection} failed (injected)", operation=operation)
    failing = [doc_id for doc_id in doc_ids if doc_id in self.fail_ids]
    if failing:
      raise StoreError(f"{operation} on {self.collection}/{failing[0]} failed (injected)", operation=operation)

  def fail_subscriptions(self, error: Optional[BaseException] = None) -> None:
    """Break every open listener."""
    for subscription in list(self._subscriptions):
      subscription.push_error(error or StoreError("listener failed (injected)", operation="subscribe"))

  # ==================== READS ====================

  def snapshot(self) -> Snapshot:
    return [{"id": doc_id, **copy.deepcopy(data)} for doc_id, data in self._docs.items()]

  @property
  def subscription_count(self) -> int:
    return len(self._subscriptions)

  async def list_documents(self) -> Snapshot:
    self._check("list")
    return self.snapshot()

  async def get(self, doc_id: str) -> Optional[Document]:
    self._check("get")
    if doc_id not in self._docs:
      return None
    return {"id": doc_id, **copy.deepcopy(self._docs[doc_id])}

  # ==================== WRITES ====================

  def _publish(self) -> None:
    snapshot = self.snapshot()
    for subscription in list(self._subscriptions):
      subscription.push(copy.deepcopy(snapshot))

  async def add(self, data: dict) -> str:
    self._check("add")
    doc_id = generate_document_id()
    self._docs[doc_id] = _resolve_timestamps(data)
    self.writes.append(("add", doc_id, dict(data)))
    self._publish()
    return doc_id

  async def update(self, doc_id: str, data: dict) -> None:
    self._check("update", [doc_id])
    if doc_id not in self._docs:
      raise StoreError(f"No document to update: {self.collection}/{doc_id}", operation="update")
    self._docs[doc_id].update(_resolve_timestamps(data))
    self.writes.append(("update", doc_id, dict(data)))
    self._publish()

  async def delete(self, doc_id: str) -> None:
    self._check("delete", [doc_id])
    self._docs.pop(doc_id, None)
    self.writes.append(("delete", doc_id, None))
    self._publish()

  async def delete_many(self, doc_ids: list[str]) -> None:
    self._check("delete_many", doc_ids)
    for doc_id in doc_ids:
      self._docs.pop(doc_id, None)
    self.writes.append(("delete_many", None, list(doc_ids)))
    self._publish()

  # ==================== REALTIME ====================

  async def subscribe(self) -> Subscription:
    subscription = Subscription()
    subscription._on_close = lambda: self._release(subscription)
    self._subscriptions.append(subscription)
    subscription.push(self.snapshot())
    logger.debug(f"✓ Memory listener on {self.collection} ({len(self._subscriptions)} open)")
    return subscription

  def _release(self, subscription: Subscription) -> None:
    if subscription in self._subscriptions:
      self._subscriptions.remove(subscription)
