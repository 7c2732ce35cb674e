from escola.models.base import BaseModel
from escola.models.enums import COLUMN_ORDER, TaskStatus
from escola.models.task import Task
from escola.types import TaskId
from pydantic import Field


class BoardColumn(BaseModel):
  """A derived column. Rebuilt from scratch on every snapshot, never stored."""
  id: TaskStatus
  title: str
  task_ids: list[TaskId] = Field(default_factory=list)


def empty_columns() -> dict[TaskStatus, BoardColumn]:
  return {status: BoardColumn(id=status, title=status.column_title) for status in COLUMN_ORDER}


class BoardState(BaseModel):
  tasks: dict[TaskId, Task] = Field(default_factory=dict)
  columns: dict[TaskStatus, BoardColumn] = Field(default_factory=empty_columns)
  loading: bool = True
  error: str | None = None

  def column_tasks(self, status: TaskStatus) -> list[Task]:
    """Tasks of a column in column order, skipping ids with no task."""
    column = self.columns[status]
    return [self.tasks[task_id] for task_id in column.task_ids if task_id in self.tasks]
