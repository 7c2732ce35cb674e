from escola.models.enums import TaskStatus, Role, COLUMN_ORDER, COLUMN_TITLES
from escola.models.task import Task, TaskCreate, TaskUpdate, TaskMove, DropLocation
from escola.models.board import BoardColumn, BoardState, empty_columns
from escola.models.user import UserContext, Assignee
from escola.models.school_class import SchoolClass, ClassCreate, ClassUpdate
