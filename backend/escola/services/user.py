#user.py
import logging

from escola.clients import DocumentStore, StoreError
from escola.errors import OperationError
from escola.models import Assignee

logger = logging.getLogger(__name__)


async def list_users(store: DocumentStore) -> list[Assignee]:
  """Gets the user directory from firestore.

  Profiles are owned by the authentication side; this only reads the id and
  display name of each user, skipping entries without a name.

  Args:
      store: The users collection.

  Returns:
      The users tasks can be assigned to.
  """
  try:
    documents = await store.list_documents()
  except StoreError as e:
    logger.error(f"❌ Erro ao carregar utilizadores: {e}")
    raise OperationError("Erro ao carregar utilizadores.")

  return [
    Assignee(id=document["id"], name=document["name"])
    for document in documents
    if isinstance(document.get("name"), str) and document["name"]
  ]
