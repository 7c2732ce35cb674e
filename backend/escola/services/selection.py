from escola.types import TaskId


class Selection:
  """Task ids picked for bulk deletion on one board view.

  Owned by the board session and meant for the "done" column only. The
  session checks toggled ids and narrows the selection on every snapshot.
  """

  def __init__(self, ids=()):
    self._ids: set[TaskId] = set(ids)

  def toggle(self, task_id: TaskId) -> bool:
    """Flip membership. Returns whether the id is now selected."""
    if task_id in self._ids:
      self._ids.discard(task_id)
      return False
    self._ids.add(task_id)
    return True

  def select_all(self, task_ids: list[TaskId]) -> None:
    """Clear if every id is already selected, otherwise select exactly these ids."""
    if task_ids and all(task_id in self._ids for task_id in task_ids):
      self._ids = set()
    else:
      self._ids = set(task_ids)

  def all_selected(self, task_ids: list[TaskId]) -> bool:
    return bool(task_ids) and all(task_id in self._ids for task_id in task_ids)

  def retain(self, task_ids) -> None:
    """Drop every selected id that is not among task_ids."""
    self._ids &= set(task_ids)

  def clear(self) -> None:
    self._ids = set()

  @property
  def ids(self) -> list[TaskId]:
    return sorted(self._ids)

  def __contains__(self, task_id) -> bool:
    return task_id in self._ids

  def __len__(self) -> int:
    return len(self._ids)

  def __bool__(self) -> bool:
    return bool(self._ids)
