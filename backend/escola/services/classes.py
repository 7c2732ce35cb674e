import logging

from pydantic import ValidationError

from escola.clients import DocumentStore, StoreError
from escola.errors import OperationError
from escola.models import ClassCreate, ClassUpdate, SchoolClass
from escola.types import ClassId, Snapshot

logger = logging.getLogger(__name__)


def to_classes(documents: Snapshot) -> list[SchoolClass]:
  """Parse a classes snapshot, skipping documents that do not parse."""
  classes = []
  for document in documents:
    try:
      classes.append(SchoolClass.model_validate(document))
    except ValidationError as e:
      logger.warning(f"⚠️  Skipping malformed class document {document.get('id')}: {e}")
  return classes


async def list_classes(store: DocumentStore) -> list[SchoolClass]:
  try:
    documents = await store.list_documents()
  except StoreError as e:
    logger.error(f"❌ Erro ao carregar turmas: {e}")
    raise OperationError("Erro ao carregar turmas.")
  return to_classes(documents)


async def add_class(store: DocumentStore, class_data: ClassCreate) -> ClassId:
  """Create a class.

  Args:
      store: The classes collection.
      class_data: The class data to store.

  Returns:
      The id assigned by the store.
  """
  try:
    return await store.add(class_data.model_dump(by_alias=True))
  except StoreError as e:
    logger.error(f"❌ Erro ao adicionar turma: {e}")
    raise OperationError("Erro ao adicionar turma.")


async def update_class(store: DocumentStore, class_id: ClassId, update_data: ClassUpdate) -> None:
  """Update a class. Only the fields that were sent are written.

  Args:
      store: The classes collection.
      class_id: The class id.
      update_data: The fields to update.
  """
  update_dict = update_data.model_dump(by_alias=True, exclude_unset=True)
  if not update_dict:
    return
  try:
    await store.update(class_id, update_dict)
  except StoreError as e:
    logger.error(f"❌ Erro ao atualizar turma {class_id}: {e}")
    raise OperationError("Erro ao atualizar turma.")


async def delete_class(store: DocumentStore, class_id: ClassId) -> None:
  try:
    await store.delete(class_id)
  except StoreError as e:
    logger.error(f"❌ Erro ao deletar turma {class_id}: {e}")
    raise OperationError("Ocorreu um erro ao deletar a turma.")
