from escola.models.base import BaseModel
from escola.types import ClassId, UserId
from pydantic import ConfigDict


class SchoolClass(BaseModel):
  """A class (turma). Documents may carry extra fields, which are kept."""
  model_config = ConfigDict(extra="allow")

  id: ClassId
  name: str = ""
  teacher_id: UserId | None = None
  teacher_name: str | None = None
  shift: str | None = None
  year: int | None = None


class ClassCreate(BaseModel):
  model_config = ConfigDict(extra="allow")

  name: str
  teacher_id: UserId | None = None
  teacher_name: str | None = None
  shift: str | None = None
  year: int | None = None


class ClassUpdate(BaseModel):
  """Fields to update. All fields are optional."""
  model_config = ConfigDict(extra="allow")

  name: str | None = None
  teacher_id: UserId | None = None
  teacher_name: str | None = None
  shift: str | None = None
  year: int | None = None
