"""
Role-based capabilities for the task board.

Pure functions of the caller's role: no I/O and no side effects.
"""
from dataclasses import dataclass

from escola.models.enums import Role
from escola.models.task import Task
from escola.models.user import Assignee, UserContext
from escola.types import UserId


@dataclass(frozen=True)
class Capabilities:
  can_add: bool
  can_manage: bool


# Every Role member must have a row here.
CAPABILITIES: dict[Role, Capabilities] = {
  Role.COORDENADOR: Capabilities(can_add=True, can_manage=True),
  Role.DIRETOR: Capabilities(can_add=True, can_manage=True),
  Role.PROFESSOR: Capabilities(can_add=True, can_manage=False),
  Role.PROFESSOR_APOIO: Capabilities(can_add=True, can_manage=False),
  Role.AUXILIAR_COORDENACAO: Capabilities(can_add=True, can_manage=False),
}


def capabilities(role: Role) -> Capabilities:
  return CAPABILITIES[Role(role)]


def can_add(role: Role) -> bool:
  """Whether the role may create tasks."""
  return capabilities(role).can_add


def can_manage(role: Role) -> bool:
  """Whether the role may edit or delete any task, select all and bulk delete."""
  return capabilities(role).can_manage


def can_drag(role: Role, task: Task, current_user_id: UserId) -> bool:
  """Managers drag anything; everyone else only the tasks assigned to them."""
  return can_manage(role) or task.assignee_id == current_user_id


def assignable_users(user: UserContext, users: list[Assignee]) -> list[Assignee]:
  """Who the user may assign a new task to.

  Managers may pick anyone in the directory, every other role only itself.
  """
  if can_manage(user.role):
    return list(users)
  return [Assignee(id=user.id, name=user.name)]
