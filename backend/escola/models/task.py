from escola.models.base import BaseModel, datetime
from escola.models.enums import TaskStatus
from escola.types import TaskId, UserId
from pydantic import Field


class Task(BaseModel):
  """A task document as read from the store.

  Attributes:
      id: Document id assigned by the store.
      status: Raw status string. Values outside TaskStatus are kept so the
          task is still indexed, but it lands in no column.
      moved_at: Last time the task changed column, used for stuck detection.
      due_date: Local midnight of the due day, or None.
  """
  id: TaskId
  title: str = ""
  description: str = ""
  assignee_id: UserId | None = None
  assignee_name: str | None = None
  status: str = ""
  created_at: datetime | None = None
  updated_at: datetime | None = None
  moved_at: datetime | None = None
  due_date: datetime | None = None
  created_by: UserId | None = None
  created_by_name: str | None = None
  updated_by: UserId | None = None
  updated_by_name: str | None = None

  @property
  def bucket(self) -> TaskStatus | None:
    return TaskStatus.parse(self.status)

  @property
  def is_done(self) -> bool:
    return self.status == TaskStatus.DONE.value


class TaskCreate(BaseModel):
  """Form data for a new task. due_date is a calendar date "YYYY-MM-DD"."""
  title: str = Field(min_length=1)
  description: str = ""
  assignee_id: UserId
  due_date: str | None = None


class TaskUpdate(BaseModel):
  """Full replacement of the editable fields. Status is not editable here."""
  title: str = Field(min_length=1)
  description: str = ""
  assignee_id: UserId
  assignee_name: str
  due_date: str | None = None


class DropLocation(BaseModel):
  column_id: str
  index: int = 0


class TaskMove(BaseModel):
  """A drag-and-drop drop event. No destination means it was dropped outside."""
  source: DropLocation
  destination: DropLocation | None = None
