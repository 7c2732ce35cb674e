"""
Calendar helpers for due dates and stalled-card detection.

All "today" and date comparisons happen in the board's local zone
(TIMEZONE, or the host zone when unset).
"""
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from escola.config import STUCK_BUSINESS_DAYS, TIMEZONE
from escola.errors import BoardValidationError
from escola.models.task import Task


def to_local(value: datetime) -> datetime:
  """Convert an aware timestamp to the board zone. Naive values are local already."""
  if value.tzinfo is None:
    return value
  if TIMEZONE:
    return value.astimezone(ZoneInfo(TIMEZONE))
  return value.astimezone()


def today() -> date:
  if TIMEZONE:
    return datetime.now(ZoneInfo(TIMEZONE)).date()
  return date.today()


def normalize_due_date(value: str | None) -> datetime | None:
  """Turn a "YYYY-MM-DD" form value into local midnight of that day.

  Empty values mean "no due date" and give None.
  """
  if not value:
    return None
  try:
    day = date.fromisoformat(value)
  except ValueError:
    raise BoardValidationError(f"Data de prazo inválida: {value}")
  if TIMEZONE:
    return datetime.combine(day, time.min, tzinfo=ZoneInfo(TIMEZONE))
  return datetime.combine(day, time.min).astimezone()


def business_days(start: date, end: date) -> int:
  """Count Monday-Saturday days from start to end, both inclusive."""
  count = 0
  current = start
  while current <= end:
    if current.weekday() != 6:  # Sunday
      count += 1
    current += timedelta(days=1)
  return count


def is_overdue(task: Task, on: date) -> bool:
  if task.due_date is None or task.is_done:
    return False
  return on > to_local(task.due_date).date()


def days_stuck(task: Task, on: date) -> int:
  """Business days since the task last changed column; 0 when done."""
  if task.moved_at is None or task.is_done:
    return 0
  return business_days(to_local(task.moved_at).date(), on)


def is_stuck(task: Task, on: date, threshold: int = STUCK_BUSINESS_DAYS) -> bool:
  return days_stuck(task, on) > threshold
