from enum import Enum


class TaskStatus(str, Enum):
  """The three fixed board buckets, in display order."""
  TODO = "todo"
  INPROGRESS = "inprogress"
  DONE = "done"

  @property
  def column_title(self) -> str:
    return COLUMN_TITLES[self]

  @classmethod
  def parse(cls, value) -> "TaskStatus | None":
    try:
      return cls(value)
    except ValueError:
      return None


COLUMN_TITLES = {
  TaskStatus.TODO: "A Fazer",
  TaskStatus.INPROGRESS: "Em Progresso",
  TaskStatus.DONE: "Feito",
}

COLUMN_ORDER = [TaskStatus.TODO, TaskStatus.INPROGRESS, TaskStatus.DONE]


class Role(str, Enum):
  """Roles a school user can hold. Capabilities live in escola.permissions."""
  COORDENADOR = "coordenador"
  DIRETOR = "diretor"
  PROFESSOR = "professor"
  PROFESSOR_APOIO = "professor_apoio"
  AUXILIAR_COORDENACAO = "auxiliar_coordenacao"
