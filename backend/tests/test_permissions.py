"""
Tests for the role capability table.
"""
import pytest

from escola.models import Assignee, Role, Task
from escola.permissions import CAPABILITIES, assignable_users, can_add, can_drag, can_manage
from factories import COORDENADOR, DIRETOR, PROFESSOR, PROFESSOR_APOIO


def test_every_role_has_a_capability_row():
    assert set(CAPABILITIES) == set(Role)


@pytest.mark.parametrize("role", list(Role))
def test_every_role_can_add(role):
    assert can_add(role) is True


@pytest.mark.parametrize("role,expected", [
    (Role.COORDENADOR, True),
    (Role.DIRETOR, True),
    (Role.PROFESSOR, False),
    (Role.PROFESSOR_APOIO, False),
    (Role.AUXILIAR_COORDENACAO, False),
])
def test_can_manage(role, expected):
    assert can_manage(role) is expected


def test_role_strings_are_accepted():
    assert can_manage("diretor") is True


def test_unknown_role_string_is_an_error():
    with pytest.raises(ValueError):
        can_manage("coordenadora")


@pytest.mark.parametrize("role", list(Role))
@pytest.mark.parametrize("assignee_id", ["me", "someone-else", None])
def test_can_drag_is_manage_or_own_task(role, assignee_id):
    task = Task(id="t", status="todo", assignee_id=assignee_id)
    expected = can_manage(role) or assignee_id == "me"
    assert can_drag(role, task, "me") is expected


class TestAssignableUsers:

    DIRECTORY = [
        Assignee(id="u-coord", name="Ana Coordenadora"),
        Assignee(id="u-prof", name="Carla Professora"),
        Assignee(id="u-apoio", name="Davi Apoio"),
    ]

    def test_managers_get_whole_directory(self):
        assert assignable_users(COORDENADOR, self.DIRECTORY) == self.DIRECTORY
        assert assignable_users(DIRETOR, self.DIRECTORY) == self.DIRECTORY

    def test_others_only_themselves(self):
        assert assignable_users(PROFESSOR, self.DIRECTORY) == [Assignee(id="u-prof", name="Carla Professora")]
        assert assignable_users(PROFESSOR_APOIO, []) == [Assignee(id="u-apoio", name="Davi Apoio")]
