import asyncio
import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status
from escola.clients import DocumentStore
from escola.dependencies.auth import get_current_user, get_websocket_user
from escola.dependencies.store import get_classes_store
from escola.errors import BoardError, SubscriptionError
from escola.models import ClassCreate, ClassUpdate, UserContext
from escola.routes import http_error
from escola.services import classes as class_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/classes", tags=["Classes"])


@router.get("", status_code=status.HTTP_200_OK)
async def get_classes(user: UserContext = Depends(get_current_user),
                      store: DocumentStore = Depends(get_classes_store)) -> list[dict]:
  """List every class."""
  try:
    classes = await class_service.list_classes(store)
  except BoardError as e:
    raise http_error(e)
  return [school_class.to_wire() for school_class in classes]


@router.post("", status_code=status.HTTP_201_CREATED)
async def post_class(class_data: ClassCreate,
                     user: UserContext = Depends(get_current_user),
                     store: DocumentStore = Depends(get_classes_store)) -> dict:
  try:
    class_id = await class_service.add_class(store, class_data)
  except BoardError as e:
    raise http_error(e)
  return {"id": class_id}


@router.patch("/{class_id}", status_code=status.HTTP_200_OK)
async def patch_class(class_id: str, update_data: ClassUpdate,
                      user: UserContext = Depends(get_current_user),
                      store: DocumentStore = Depends(get_classes_store)) -> dict:
  try:
    await class_service.update_class(store, class_id, update_data)
  except BoardError as e:
    raise http_error(e)
  return {"id": class_id}


@router.delete("/{class_id}", status_code=status.HTTP_200_OK)
async def delete_class(class_id: str,
                       user: UserContext = Depends(get_current_user),
                       store: DocumentStore = Depends(get_classes_store)) -> dict:
  try:
    await class_service.delete_class(store, class_id)
  except BoardError as e:
    raise http_error(e)
  return {"id": class_id, "deleted": True}


@router.websocket("/ws")
async def classes_socket(websocket: WebSocket, store: DocumentStore = Depends(get_classes_store)):
  """Realtime class list: one full listing per change."""
  user = await get_websocket_user(websocket)
  await websocket.accept()
  if user is None:
    await websocket.send_json({"type": "classes", "classes": [], "authenticated": False})
    await websocket.close()
    return

  subscription = await store.subscribe()

  async def forward():
    try:
      async for snapshot in subscription:
        classes = class_service.to_classes(snapshot)
        await websocket.send_json({"type": "classes", "classes": [c.to_wire() for c in classes]})
    except SubscriptionError as e:
      logger.error(f"❌ Erro ao escutar as alterações nas turmas: {e.__cause__ or e}")
      await websocket.send_json({"type": "classes", "classes": [], "error": e.message})

  async def forward_until_gone():
    try:
      await forward()
    except Exception as e:
      logger.warning(f"⚠️  Envio de turmas para {user.id} interrompido: {e}")

  pump = asyncio.create_task(forward_until_gone())
  try:
    while True:
      # The client only listens; incoming frames are drained to notice disconnects.
      await websocket.receive_text()
  except WebSocketDisconnect:
    logger.info(f"🔌 WebSocket de turmas desconectado - {user.id}")
  finally:
    try:
      pump.cancel()
      try:
        await pump
      except asyncio.CancelledError:
        pass
    finally:
      subscription.close()
