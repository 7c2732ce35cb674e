from escola.models.base import BaseModel
from escola.models.enums import Role
from escola.types import UserId


class UserContext(BaseModel):
  """The signed-in caller, as supplied by the authentication layer."""
  id: UserId
  name: str
  role: Role


class Assignee(BaseModel):
  """An entry of the user directory a task can be assigned to."""
  id: UserId
  name: str
