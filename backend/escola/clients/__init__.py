from escola.clients.base import DocumentStore, StoreError, Subscription
from escola.clients.memory import MemoryStore
from escola.config import STORE_BACKEND

TASKS_COLLECTION = "tasks"
CLASSES_COLLECTION = "classes"
USERS_COLLECTION = "users"

_memory_stores: dict[str, MemoryStore] = {}


def get_store(collection: str) -> DocumentStore:
  """Store for a collection, on the backend chosen by STORE_BACKEND."""
  if STORE_BACKEND == "memory":
    if collection not in _memory_stores:
      _memory_stores[collection] = MemoryStore(collection)
    return _memory_stores[collection]

  from escola.clients.firebase import FirestoreStore
  return FirestoreStore(collection)
