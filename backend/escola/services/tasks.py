"""
Task writes: create, edit, move, delete and bulk delete.

Every write is a single awaited store call. Nothing is mutated locally: the
realtime feed brings the result back to every board. Failures are reported
once and never retried.
"""
import logging

from google.cloud.firestore import SERVER_TIMESTAMP

from escola.clients import DocumentStore, StoreError
from escola.errors import BoardValidationError, OperationError, PermissionDenied, TaskNotFound
from escola.models.enums import TaskStatus
from escola.models.task import Task, TaskCreate, TaskMove, TaskUpdate
from escola.models.user import Assignee, UserContext
from escola.permissions import assignable_users, can_add, can_drag, can_manage
from escola.services.selection import Selection
from escola.types import TaskId
from escola.utils.dates import normalize_due_date

logger = logging.getLogger(__name__)

TASK_ADDED = "Tarefa adicionada com sucesso!"
TASK_UPDATED = "Tarefa atualizada com sucesso!"
TASK_MOVED = "Tarefa movida com sucesso!"
TASK_DELETED = "Tarefa apagada com sucesso!"
SELECTED_DELETED = "Tarefas selecionadas apagadas com sucesso!"


async def get_task(store: DocumentStore, task_id: TaskId) -> Task:
  """Fetch one task.

  Raises:
      TaskNotFound: If no document has this id.
      OperationError: If the store read fails.
  """
  try:
    document = await store.get(task_id)
  except StoreError as e:
    logger.error(f"❌ Erro ao ler tarefa {task_id}: {e}")
    raise OperationError("Erro ao carregar a tarefa.")
  if document is None:
    raise TaskNotFound("Tarefa não encontrada.")
  return Task.model_validate(document)


async def create_task(store: DocumentStore, user: UserContext, task_data: TaskCreate,
                      users: list[Assignee]) -> TaskId:
  """Create a task in the "todo" column.

  Args:
      store: The tasks collection.
      user: The acting user; needs add permission.
      task_data: Form data. due_date is "YYYY-MM-DD" or empty.
      users: The user directory; narrowed to what the actor may assign.

  Returns:
      The id assigned by the store.
  """
  if not can_add(user.role):
    raise PermissionDenied("Não tem permissão para adicionar tarefas.")

  assignee = next((u for u in assignable_users(user, users) if u.id == task_data.assignee_id), None)
  if assignee is None:
    raise BoardValidationError("Utilizador responsável não encontrado.")

  new_task = {
    "title": task_data.title,
    "description": task_data.description,
    "assigneeId": assignee.id,
    "assigneeName": assignee.name,
    "status": TaskStatus.TODO.value,
    "createdAt": SERVER_TIMESTAMP,
    "updatedAt": SERVER_TIMESTAMP,
    "movedAt": SERVER_TIMESTAMP,
    "createdBy": user.id,
    "createdByName": user.name,
    "dueDate": normalize_due_date(task_data.due_date),
  }

  try:
    task_id = await store.add(new_task)
  except StoreError as e:
    logger.error(f"❌ Erro ao adicionar tarefa: {e}")
    raise OperationError("Erro ao guardar a tarefa.")

  logger.info(f"✓ Task {task_id} created by {user.id} for {assignee.id}")
  return task_id


async def update_task(store: DocumentStore, user: UserContext, task_id: TaskId,
                      update_data: TaskUpdate) -> None:
  """Replace the editable fields of a task. Status and movedAt are left alone."""
  if not can_manage(user.role):
    raise PermissionDenied("Não tem permissão para editar tarefas.")

  data_to_update = {
    "title": update_data.title,
    "description": update_data.description,
    "assigneeId": update_data.assignee_id,
    "assigneeName": update_data.assignee_name,
    "updatedAt": SERVER_TIMESTAMP,
    "updatedBy": user.id,
    "updatedByName": user.name,
    "dueDate": normalize_due_date(update_data.due_date),
  }

  try:
    await store.update(task_id, data_to_update)
  except StoreError as e:
    logger.error(f"❌ Erro ao atualizar tarefa {task_id}: {e}")
    raise OperationError("Erro ao atualizar a tarefa.")

  logger.info(f"✓ Task {task_id} updated by {user.id}")


def is_noop_drop(move: TaskMove) -> bool:
  """Dropped outside any column, or back where it started."""
  if move.destination is None:
    return True
  return (move.destination.column_id == move.source.column_id
          and move.destination.index == move.source.index)


async def move_task(store: DocumentStore, user: UserContext, task_id: TaskId, move: TaskMove,
                    task: Task | None = None) -> bool:
  """Apply a drop event.

  Writes exactly status, updatedAt and movedAt. Last write wins at the
  store; the board learns the outcome from the next snapshot.

  Args:
      task: The task as currently known to the caller's board. Fetched from
          the store when not given.

  Returns:
      False when the drop was a no-op and nothing was written.
  """
  if is_noop_drop(move):
    return False

  destination = TaskStatus.parse(move.destination.column_id)
  if destination is None:
    raise BoardValidationError(f"Coluna desconhecida: {move.destination.column_id}")

  if task is None:
    task = await get_task(store, task_id)
  if not can_drag(user.role, task, user.id):
    raise PermissionDenied("Não tem permissão para mover esta tarefa.")

  try:
    await store.update(task_id, {
      "status": destination.value,
      "updatedAt": SERVER_TIMESTAMP,
      "movedAt": SERVER_TIMESTAMP,
    })
  except StoreError as e:
    logger.error(f"❌ Erro ao mover tarefa {task_id}: {e}")
    raise OperationError("Erro ao mover a tarefa.")

  logger.info(f"✓ Task {task_id} moved to {destination.value} by {user.id}")
  return True


async def delete_task(store: DocumentStore, user: UserContext, task_id: TaskId,
                      confirmed: bool) -> bool:
  """Delete one task. Returns False when the user did not confirm."""
  if not can_manage(user.role):
    raise PermissionDenied("Não tem permissão para apagar tarefas.")
  if not confirmed:
    return False

  try:
    await store.delete(task_id)
  except StoreError as e:
    logger.error(f"❌ Erro ao apagar tarefa {task_id}: {e}")
    raise OperationError("Erro ao apagar a tarefa.")

  logger.info(f"✓ Task {task_id} deleted by {user.id}")
  return True


async def delete_selected(store: DocumentStore, user: UserContext, selection: Selection,
                          confirmed: bool) -> int:
  """Delete every selected task in one atomic batch.

  The selection is cleared only when the batch commits. On failure nothing
  is deleted and the selection is kept as it was.

  Returns:
      How many tasks were deleted; 0 when the user did not confirm.
  """
  if not can_manage(user.role):
    raise PermissionDenied("Não tem permissão para apagar tarefas.")
  if not selection:
    raise BoardValidationError("Nenhuma tarefa selecionada.")
  if not confirmed:
    return 0

  task_ids = selection.ids
  try:
    await store.delete_many(task_ids)
  except StoreError as e:
    logger.error(f"❌ Erro ao apagar tarefas em lote: {e}")
    raise OperationError("Erro ao apagar as tarefas.")

  selection.clear()
  logger.info(f"✓ {len(task_ids)} tasks deleted in batch by {user.id}")
  return len(task_ids)
