"""
Renders a board state into the JSON the front-end draws.

Presentation flags (overdue, stuck, permissions, selection) are computed
here on every render and never stored.
"""
from datetime import date

from escola.models import BoardState, COLUMN_ORDER, Task, TaskStatus, UserContext
from escola.permissions import can_add, can_drag, can_manage
from escola.services.selection import Selection
from escola.utils.dates import days_stuck, is_overdue, is_stuck

NOT_AUTHENTICATED_MESSAGE = "Por favor, faça login para aceder ao quadro de tarefas."
LOADING_MESSAGE = "Carregando tarefas..."
EMPTY_COLUMN_MESSAGE = "Nenhuma tarefa"


def bulk_delete_confirmation(count: int) -> str:
  return f"Tem certeza que deseja apagar as {count} tarefas selecionadas? Esta ação é irreversível."


def render_placeholder() -> dict:
  return {"authenticated": False, "message": NOT_AUTHENTICATED_MESSAGE}


def render_card(task: Task, column: TaskStatus, user: UserContext, selection: Selection, on: date) -> dict:
  manage = can_manage(user.role)
  card = task.to_wire()
  card.update({
    "overdue": is_overdue(task, on),
    "daysStuck": days_stuck(task, on),
    "stuck": is_stuck(task, on),
    "canDrag": can_drag(user.role, task, user.id),
    "canEdit": manage,
    "canDelete": manage,
    "selectable": manage and column is TaskStatus.DONE,
    "selected": column is TaskStatus.DONE and task.id in selection,
  })
  return card


def render_board(state: BoardState, user: UserContext | None, selection: Selection, on: date) -> dict:
  """Everything one user sees on the board right now."""
  if user is None:
    return render_placeholder()
  if state.error:
    return {"authenticated": True, "error": state.error, "retryable": True}
  if state.loading:
    return {"authenticated": True, "loading": True, "message": LOADING_MESSAGE}

  manage = can_manage(user.role)
  columns = []
  for status in COLUMN_ORDER:
    cards = [render_card(task, status, user, selection, on) for task in state.column_tasks(status)]
    column = {
      "id": status.value,
      "title": state.columns[status].title,
      "count": len(cards),
      "cards": cards,
    }
    if not cards:
      column["emptyMessage"] = EMPTY_COLUMN_MESSAGE
    if status is TaskStatus.DONE and manage:
      done_ids = state.columns[status].task_ids
      column["selectAll"] = {
        "visible": bool(done_ids),
        "checked": selection.all_selected(done_ids),
      }
      column["bulkDelete"] = {
        "visible": len(selection) > 0,
        "count": len(selection),
        "confirmMessage": bulk_delete_confirmation(len(selection)),
      }
    columns.append(column)

  return {
    "authenticated": True,
    "user": user.to_wire(),
    "canAdd": can_add(user.role),
    "columns": columns,
  }
