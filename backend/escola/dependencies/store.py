from escola.clients import (
  CLASSES_COLLECTION,
  TASKS_COLLECTION,
  USERS_COLLECTION,
  DocumentStore,
  get_store,
)


def get_tasks_store() -> DocumentStore:
  return get_store(TASKS_COLLECTION)


def get_classes_store() -> DocumentStore:
  return get_store(CLASSES_COLLECTION)


def get_users_store() -> DocumentStore:
  return get_store(USERS_COLLECTION)
