# SPDX-License-Identifier: MIT

from abc import ABC, abstractmethod
from typing import Optional, TypedDict

import pendulum

from todosync.model.todo import Comment, Todo
from todosync.model.workspace import Workspace


class NewTodo(TypedDict):
    title: str
    due_date: Optional[pendulum.DateTime]
    urgency: Optional[float]
    completed: bool
    workspace_id: Optional[str]


class TodoService(ABC):
    """
    The remote, authoritative todo collection of the signed-in user.

    Every method raises todosync.errors.RemoteError when the call fails.
    """

    @abstractmethod
    async def list_todos(self) -> list[Todo]: ...

    @abstractmethod
    async def create_todo(self, new_todo: NewTodo) -> Todo: ...

    @abstractmethod
    async def update_todo(
        self,
        id: str,
        completed: Optional[bool] = None,
        due_date: Optional[pendulum.DateTime] = None,
    ) -> Todo: ...

    @abstractmethod
    async def delete_todo(self, id: str) -> None: ...

    @abstractmethod
    async def create_comment(self, todo_id: str, text: str) -> Comment: ...

    @abstractmethod
    async def delete_comment(self, todo_id: str, comment_id: str) -> None: ...

    @abstractmethod
    async def list_workspaces(self) -> list[Workspace]: ...

    @abstractmethod
    async def create_workspace(self, name: str) -> Workspace: ...

    @abstractmethod
    async def delete_workspace(self, id: str) -> None: ...

    async def aclose(self) -> None:
        return None
