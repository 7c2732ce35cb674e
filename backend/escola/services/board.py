"""
Board reconciler: turns full task snapshots into a three-column board.

Each snapshot replaces the board wholesale. Columns are cleared, every
document is indexed by id and its id is appended to the column matching its
status, in document order. Nothing is patched incrementally.
"""
import logging

from pydantic import ValidationError

from escola.models.board import BoardState, empty_columns
from escola.models.task import Task
from escola.types import Snapshot

logger = logging.getLogger(__name__)

SUBSCRIPTION_ERROR_MESSAGE = "Erro de conexão com a base de dados"


def reconcile(documents: Snapshot) -> BoardState:
  """Build a board from one full snapshot.

  Tasks whose status is not a known column are indexed but placed in no
  column. Malformed documents are skipped.
  """
  tasks = {}
  columns = empty_columns()
  for document in documents:
    try:
      task = Task.model_validate(document)
    except (ValidationError, TypeError) as e:
      doc_id = document.get("id") if isinstance(document, dict) else None
      logger.warning(f"⚠️  Skipping malformed task document {doc_id}: {e}")
      continue
    tasks[task.id] = task
    bucket = task.bucket
    if bucket is not None:
      columns[bucket].task_ids.append(task.id)
  return BoardState(tasks=tasks, columns=columns, loading=False, error=None)


class BoardReconciler:
  """Holds the current board for one subscriber."""

  def __init__(self):
    self.state = BoardState()

  def apply(self, documents: Snapshot) -> BoardState:
    self.state = reconcile(documents)
    return self.state

  def fail(self, message: str = SUBSCRIPTION_ERROR_MESSAGE) -> BoardState:
    """Enter the error state. Tasks are kept until a reload replaces them."""
    self.state = self.state.model_copy(update={"loading": False, "error": message})
    return self.state

  def reset(self) -> BoardState:
    self.state = BoardState()
    return self.state
