import json
import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status
from escola.clients import DocumentStore, StoreError
from escola.dependencies.auth import get_current_user, get_user_context, get_websocket_user
from escola.dependencies.store import get_tasks_store, get_users_store
from escola.errors import BoardError
from escola.models import Assignee, TaskCreate, TaskMove, TaskUpdate, UserContext
from escola.permissions import assignable_users, can_manage
from escola.routes import http_error
from escola.services import tasks as task_service
from escola.services.board import BoardReconciler
from escola.services.board_session import DELETE_TASK_CONFIRMATION, BoardSession
from escola.services.board_view import render_board, render_placeholder
from escola.services.selection import Selection
from escola.services.user import list_users
from escola.utils.dates import today

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["Tasks"])


async def _directory(user: UserContext, users_store: DocumentStore) -> list[Assignee]:
  # Only managers can pick someone else, so only they need the directory.
  if not can_manage(user.role):
    return []
  return await list_users(users_store)


@router.get("/board", status_code=status.HTTP_200_OK)
async def get_board(user: UserContext | None = Depends(get_user_context),
                    store: DocumentStore = Depends(get_tasks_store)) -> dict:
  """Render the board once from the current contents of the collection.

  Args:
      user: The caller, if any. Without one the placeholder is returned and
          the store is not read.

  Returns:
      The rendered board, its error state, or the placeholder.
  """
  if user is None:
    return render_placeholder()

  reconciler = BoardReconciler()
  try:
    reconciler.apply(await store.list_documents())
  except StoreError as e:
    logger.error(f"❌ Erro ao carregar tarefas: {e}")
    reconciler.fail()
  return render_board(reconciler.state, user, Selection(), today())


@router.get("/assignees", status_code=status.HTTP_200_OK)
async def get_assignees(user: UserContext = Depends(get_current_user),
                        users_store: DocumentStore = Depends(get_users_store)) -> list[dict]:
  """Users the caller may assign a new task to."""
  try:
    directory = await _directory(user, users_store)
  except BoardError as e:
    raise http_error(e)
  return [assignee.to_wire() for assignee in assignable_users(user, directory)]


@router.post("", status_code=status.HTTP_201_CREATED)
async def post_task(task_data: TaskCreate,
                    user: UserContext = Depends(get_current_user),
                    store: DocumentStore = Depends(get_tasks_store),
                    users_store: DocumentStore = Depends(get_users_store)) -> dict:
  """Create a task in the "A Fazer" column.

  Raises:
      HTTPException: 403 without add permission, 400 if the assignee
          cannot be resolved, 502 if the store write fails.
  """
  try:
    directory = await _directory(user, users_store)
    task_id = await task_service.create_task(store, user, task_data, directory)
  except BoardError as e:
    raise http_error(e)
  return {"id": task_id, "message": task_service.TASK_ADDED}


@router.patch("/{task_id}", status_code=status.HTTP_200_OK)
async def patch_task(task_id: str, update_data: TaskUpdate,
                     user: UserContext = Depends(get_current_user),
                     store: DocumentStore = Depends(get_tasks_store)) -> dict:
  try:
    await task_service.update_task(store, user, task_id, update_data)
  except BoardError as e:
    raise http_error(e)
  return {"message": task_service.TASK_UPDATED}


@router.post("/{task_id}/move", status_code=status.HTTP_200_OK)
async def post_move(task_id: str, move: TaskMove,
                    user: UserContext = Depends(get_current_user),
                    store: DocumentStore = Depends(get_tasks_store)) -> dict:
  """Apply a drop event. Drops back onto the same spot write nothing."""
  try:
    moved = await task_service.move_task(store, user, task_id, move)
  except BoardError as e:
    raise http_error(e)
  return {"moved": moved, "message": task_service.TASK_MOVED if moved else None}


@router.delete("/{task_id}", status_code=status.HTTP_200_OK)
async def delete_task(task_id: str, confirm: bool = False,
                      user: UserContext = Depends(get_current_user),
                      store: DocumentStore = Depends(get_tasks_store)) -> dict:
  """Delete one task. Without confirm=true nothing is deleted."""
  try:
    deleted = await task_service.delete_task(store, user, task_id, confirm)
  except BoardError as e:
    raise http_error(e)
  if not deleted:
    return {"deleted": False, "confirmMessage": DELETE_TASK_CONFIRMATION}
  return {"deleted": True, "message": task_service.TASK_DELETED}


@router.websocket("/board/ws")
async def board_socket(websocket: WebSocket, store: DocumentStore = Depends(get_tasks_store)):
  """Live board: snapshots out, drag/selection/delete frames in."""
  user = await get_websocket_user(websocket)
  await websocket.accept()

  if user is None:
    await websocket.send_json({"type": "board", "board": render_placeholder()})
    await websocket.close()
    return

  session = BoardSession(store, user, websocket.send_json)
  await session.start()
  try:
    while True:
      text_data = await websocket.receive_text()
      try:
        message = json.loads(text_data)
      except json.JSONDecodeError:
        logger.error(f"❌ JSON inválido recebido via WebSocket de {user.id}")
        await session.notify("error", "Mensagem inválida.")
        continue
      if not isinstance(message, dict):
        await session.notify("error", "Mensagem inválida.")
        continue
      await session.handle(message)
  except WebSocketDisconnect:
    logger.info(f"🔌 WebSocket desconectado - {user.id}")
  finally:
    await session.close()
