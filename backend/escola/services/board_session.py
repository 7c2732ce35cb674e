"""
One live board view.

A session owns the realtime subscription, the reconciler and the selection
of a single connected client. Snapshots are pushed to the client as
rendered "board" frames; client frames are dispatched by type and answered
with "notice" frames, the way the browser used to show toasts.
"""
import asyncio
import logging
from typing import Awaitable, Callable, Optional

from pydantic import ValidationError

from escola.clients import DocumentStore, Subscription
from escola.errors import BoardError, BoardValidationError, PermissionDenied, SubscriptionError
from escola.models import TaskMove, TaskStatus, UserContext
from escola.permissions import can_manage
from escola.services import tasks as task_service
from escola.services.board import BoardReconciler
from escola.services.board_view import bulk_delete_confirmation, render_board
from escola.services.selection import Selection
from escola.utils.dates import today

logger = logging.getLogger(__name__)

DELETE_TASK_CONFIRMATION = "Tem a certeza de que deseja apagar esta tarefa? Esta ação é irreversível."

Send = Callable[[dict], Awaitable[None]]


class BoardSession:
  """Board state and selection for one connected user."""

  def __init__(self, store: DocumentStore, user: UserContext, send: Send, clock=today):
    self.store = store
    self.user = user
    self.send = send
    self.clock = clock
    self.reconciler = BoardReconciler()
    self.selection = Selection()
    self.subscription: Optional[Subscription] = None
    self._pump: Optional[asyncio.Task] = None

  # ==================== LIFECYCLE ====================

  async def start(self) -> None:
    self.subscription = await self.store.subscribe()
    self._pump = asyncio.create_task(self._consume(self.subscription))
    logger.info(f"✅ Board session started for {self.user.id}")

  async def close(self) -> None:
    """Release the listener. Safe to call more than once, and after the pump died."""
    try:
      if self._pump is not None:
        self._pump.cancel()
        try:
          await self._pump
        except asyncio.CancelledError:
          pass
    finally:
      self._pump = None
      if self.subscription is not None:
        self.subscription.close()
        self.subscription = None
        logger.info(f"🔌 Board session closed for {self.user.id}")

  async def reload(self) -> None:
    """Manual recovery: fresh subscription, empty selection."""
    await self.close()
    self.reconciler.reset()
    self.selection.clear()
    await self.start()

  async def _consume(self, subscription: Subscription) -> None:
    try:
      async for snapshot in subscription:
        self.reconciler.apply(snapshot)
        # Tasks moved out of "done" elsewhere are no longer deletable from here.
        self.selection.retain(self._done_ids())
        await self.send_board()
    except SubscriptionError as e:
      logger.error(f"❌ Erro na subscrição de tarefas: {e.__cause__ or e}")
      self.reconciler.fail(e.message)
      await self._send_quietly()
    except Exception as e:
      # Client gone mid-send; close() still releases the listener.
      logger.warning(f"⚠️  Board pump for {self.user.id} stopped: {e}")

  async def _send_quietly(self) -> None:
    try:
      await self.send_board()
    except Exception as e:
      logger.warning(f"⚠️  Could not send board to {self.user.id}: {e}")

  # ==================== OUTGOING FRAMES ====================

  def render(self) -> dict:
    return render_board(self.reconciler.state, self.user, self.selection, self.clock())

  async def send_board(self) -> None:
    await self.send({"type": "board", "board": self.render()})

  async def notify(self, level: str, message: str) -> None:
    await self.send({"type": "notice", "level": level, "message": message})

  async def ask_confirmation(self, action: str, message: str, **extra) -> None:
    await self.send({"type": "confirm", "action": action, "message": message, **extra})

  # ==================== INCOMING FRAMES ====================

  async def handle(self, message: dict) -> None:
    """Dispatch one client frame. Errors end the action and become notices."""
    message_type = message.get("type")
    handler = self._handlers().get(message_type)
    try:
      if handler is None:
        raise BoardValidationError(f"Tipo de mensagem desconhecido: {message_type}")
      await handler(message)
    except BoardError as e:
      await self.notify("error", e.message)
    except ValidationError:
      await self.notify("error", "Mensagem inválida.")

  def _handlers(self):
    return {
      "ping": self._on_ping,
      "move": self._on_move,
      "toggle_select": self._on_toggle_select,
      "select_all": self._on_select_all,
      "delete_selected": self._on_delete_selected,
      "delete_task": self._on_delete_task,
      "reload": self._on_reload,
    }

  async def _on_ping(self, message: dict) -> None:
    await self.send({"type": "pong"})

  async def _on_move(self, message: dict) -> None:
    task_id = message.get("taskId")
    if not task_id:
      raise BoardValidationError("Tarefa não indicada.")
    move = TaskMove.model_validate(message)
    known = self.reconciler.state.tasks.get(task_id)
    if await task_service.move_task(self.store, self.user, task_id, move, task=known):
      await self.notify("success", task_service.TASK_MOVED)

  def _require_manage(self) -> None:
    if not can_manage(self.user.role):
      raise PermissionDenied("Não tem permissão para selecionar tarefas.")

  def _done_ids(self) -> list:
    return list(self.reconciler.state.columns[TaskStatus.DONE].task_ids)

  async def _on_toggle_select(self, message: dict) -> None:
    self._require_manage()
    task_id = message.get("taskId")
    if task_id not in self._done_ids():
      raise BoardValidationError("Só tarefas concluídas podem ser selecionadas.")
    self.selection.toggle(task_id)
    await self.send_board()

  async def _on_select_all(self, message: dict) -> None:
    self._require_manage()
    self.selection.select_all(self._done_ids())
    await self.send_board()

  async def _on_delete_selected(self, message: dict) -> None:
    confirmed = bool(message.get("confirm"))
    self.selection.retain(self._done_ids())
    deleted = await task_service.delete_selected(self.store, self.user, self.selection, confirmed)
    if not confirmed:
      await self.ask_confirmation("delete_selected", bulk_delete_confirmation(len(self.selection)))
      return
    if deleted:
      await self.notify("success", task_service.SELECTED_DELETED)
      await self.send_board()

  async def _on_delete_task(self, message: dict) -> None:
    task_id = message.get("taskId")
    if not task_id:
      raise BoardValidationError("Tarefa não indicada.")
    confirmed = bool(message.get("confirm"))
    if await task_service.delete_task(self.store, self.user, task_id, confirmed):
      await self.notify("success", task_service.TASK_DELETED)
    else:
      await self.ask_confirmation("delete_task", DELETE_TASK_CONFIRMATION, taskId=task_id)

  async def _on_reload(self, message: dict) -> None:
    await self.reload()
