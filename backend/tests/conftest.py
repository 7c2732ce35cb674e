"""Shared fixtures for the board tests. Everything runs on the memory store."""

import asyncio
import os

import pytest

os.environ["STORE_BACKEND"] = "memory"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-with-enough-length-for-hs256"
os.environ["TIMEZONE"] = ""

from escola.clients import MemoryStore  # noqa: E402
from escola.utils.auth import generate_session_token  # noqa: E402
from factories import task_doc  # noqa: E402


async def _settle():
    for _ in range(10):
        await asyncio.sleep(0)


@pytest.fixture
def settle():
    """Let background tasks drain their queues."""
    return _settle


@pytest.fixture
def tasks_store():
    return MemoryStore("tasks", [
        task_doc("t1", "todo"),
        task_doc("t2", "inprogress", assignee_id="u-apoio"),
        task_doc("t3", "done"),
        task_doc("t4", "done", assignee_id="u-apoio"),
    ])


@pytest.fixture
def users_store():
    return MemoryStore("users", [
        {"id": "u-coord", "name": "Ana Coordenadora", "role": "coordenador"},
        {"id": "u-prof", "name": "Carla Professora", "role": "professor"},
        {"id": "u-apoio", "name": "Davi Apoio", "role": "professor_apoio"},
    ])


@pytest.fixture
def classes_store():
    return MemoryStore("classes", [
        {"id": "c1", "name": "5º Ano A", "shift": "manhã", "year": 2024},
    ])


@pytest.fixture
def auth_header():
    def make(user):
        return {"Authorization": f"Bearer {generate_session_token(user)}"}
    return make
