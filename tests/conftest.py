"""
todosync test suite - shared fixtures.

Run:  pytest tests/ -v
"""

import asyncio
from copy import deepcopy
from pathlib import Path
from typing import Any, Iterator, Optional

import pendulum
import pytest

from todosync import configuration
from todosync.errors import RemoteError
from todosync.model.session import Session
from todosync.model.todo import Comment, Todo
from todosync.model.todo_id import committed_id
from todosync.model.workspace import Workspace
from todosync.remote.service import NewTodo, TodoService
from todosync.repository.configuration import CONFIGURATION_REPO
from todosync.repository.id_map import ID_MAP_REPO
from todosync.repository.migrate import MIGRATE_REPO

BASE_TIME = pendulum.datetime(2024, 3, 1, 9, 0, tz="UTC")


# ---------------------------------------------------------------------------
# Isolation: every test gets its own config and data directory
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point config and data files at a temp directory and reset the singletons."""
    previous_data_path = configuration.DATA_PATH
    config_path = tmp_path / "config"
    monkeypatch.setattr(configuration, "CONFIG_PATH", config_path)
    monkeypatch.setattr(configuration, "APP_CONFIG_PATH", config_path / "config.yaml")
    monkeypatch.delenv(configuration.API_BASE_URL_ENV, raising=False)

    data_path = tmp_path / "data"
    configuration.set_data_path(data_path)
    CONFIGURATION_REPO.reset()
    ID_MAP_REPO.reset()
    MIGRATE_REPO.reset()

    yield data_path

    configuration.set_data_path(previous_data_path)
    CONFIGURATION_REPO.reset()
    ID_MAP_REPO.reset()
    MIGRATE_REPO.reset()


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def make_todo(
    id: str,
    title: str = "Buy milk",
    *,
    pending: bool = False,
    completed: bool = False,
    due_date: Optional[pendulum.DateTime] = None,
    urgency: Optional[float] = None,
    updated_at: Optional[pendulum.DateTime] = None,
    workspace_id: Optional[str] = None,
    comments: Optional[list[Comment]] = None,
) -> Todo:
    return {
        "id": {"state": "pending", "value": id} if pending else committed_id(id),
        "title": title,
        "due_date": due_date,
        "urgency": urgency,
        "completed": completed,
        "workspace_id": workspace_id,
        "created_at": BASE_TIME,
        "updated_at": updated_at if updated_at is not None else BASE_TIME,
        "comments": comments if comments is not None else [],
        "user_id": "user-1",
    }


def make_comment(id: str, todo_id: str, text: str = "note", *, pending: bool = False) -> Comment:
    return {
        "id": {"state": "pending", "value": id} if pending else committed_id(id),
        "text": text,
        "todo_id": committed_id(todo_id),
        "user_id": "user-1",
        "created_at": BASE_TIME,
        "author": {"name": "Ada", "image": None},
    }


def make_workspace(id: str, name: str) -> Workspace:
    return {
        "id": id,
        "name": name,
        "owner_id": "user-1",
        "created_at": BASE_TIME,
        "updated_at": BASE_TIME,
    }


# ---------------------------------------------------------------------------
# Fake remote
# ---------------------------------------------------------------------------


class FakeTodoService(TodoService):
    """
    In-memory remote.

    fail: method names that raise RemoteError.
    gates: method name -> asyncio.Event the call waits on before answering.
    """

    def __init__(
        self,
        todos: Optional[list[Todo]] = None,
        workspaces: Optional[list[Workspace]] = None,
    ) -> None:
        self.todos: list[Todo] = list(todos or [])
        self.workspaces: list[Workspace] = list(workspaces or [])
        self.fail: set[str] = set()
        self.fail_titles: set[str] = set()
        self.gates: dict[str, asyncio.Event] = {}
        self.calls: list[tuple[str, Any]] = []
        self.due_date_override: Optional[pendulum.DateTime] = None
        self._next_id = 1

    def new_id(self, prefix: str) -> str:
        value = f"{prefix}-{self._next_id}"
        self._next_id += 1
        return value

    async def _enter(self, method: str, argument: Any = None) -> None:
        self.calls.append((method, argument))
        gate = self.gates.get(method)
        if gate is not None:
            await gate.wait()
        if method in self.fail:
            raise RemoteError(f"{method} failed", status_code=500)

    def calls_to(self, method: str) -> list[Any]:
        return [argument for name, argument in self.calls if name == method]

    def _find(self, id: str) -> Todo:
        for todo in self.todos:
            if todo["id"]["value"] == id:
                return todo
        raise RemoteError("Todo not found", status_code=404)

    async def list_todos(self) -> list[Todo]:
        await self._enter("list_todos")
        return deepcopy(self.todos)

    async def create_todo(self, new_todo: NewTodo) -> Todo:
        await self._enter("create_todo", new_todo)
        if new_todo["title"] in self.fail_titles:
            raise RemoteError("rejected", status_code=400)
        now = pendulum.now("UTC")
        todo: Todo = {
            "id": committed_id(self.new_id("srv")),
            "title": new_todo["title"],
            "due_date": new_todo["due_date"],
            "urgency": new_todo["urgency"],
            "completed": new_todo["completed"],
            "workspace_id": new_todo["workspace_id"],
            "created_at": now,
            "updated_at": now,
            "comments": [],
            "user_id": "user-1",
        }
        self.todos.append(todo)
        return deepcopy(todo)

    async def update_todo(
        self,
        id: str,
        completed: Optional[bool] = None,
        due_date: Optional[pendulum.DateTime] = None,
    ) -> Todo:
        await self._enter("update_todo", {"id": id, "completed": completed, "due_date": due_date})
        todo = self._find(id)
        if completed is not None:
            todo["completed"] = completed
        if due_date is not None:
            todo["due_date"] = (
                self.due_date_override if self.due_date_override is not None else due_date
            )
        todo["updated_at"] = pendulum.now("UTC")
        return deepcopy(todo)

    async def delete_todo(self, id: str) -> None:
        await self._enter("delete_todo", id)
        self.todos = [todo for todo in self.todos if todo["id"]["value"] != id]

    async def create_comment(self, todo_id: str, text: str) -> Comment:
        await self._enter("create_comment", {"todo_id": todo_id, "text": text})
        todo = self._find(todo_id)
        comment = make_comment(self.new_id("cmt"), todo_id, text)
        todo["comments"].append(comment)
        return deepcopy(comment)

    async def delete_comment(self, todo_id: str, comment_id: str) -> None:
        await self._enter("delete_comment", {"todo_id": todo_id, "comment_id": comment_id})
        todo = self._find(todo_id)
        todo["comments"] = [
            comment for comment in todo["comments"] if comment["id"]["value"] != comment_id
        ]

    async def list_workspaces(self) -> list[Workspace]:
        await self._enter("list_workspaces")
        return deepcopy(self.workspaces)

    async def create_workspace(self, name: str) -> Workspace:
        await self._enter("create_workspace", name)
        workspace = make_workspace(self.new_id("ws"), name)
        self.workspaces.append(workspace)
        return deepcopy(workspace)

    async def delete_workspace(self, id: str) -> None:
        await self._enter("delete_workspace", id)
        self.workspaces = [workspace for workspace in self.workspaces if workspace["id"] != id]


@pytest.fixture
def session() -> Session:
    return {"user_id": "user-1", "name": "Ada", "email": "ada@example.com", "token": "secret"}


@pytest.fixture
def service() -> FakeTodoService:
    return FakeTodoService()
