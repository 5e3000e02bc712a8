# SPDX-License-Identifier: MIT

import logging
from typing import Any, Callable, Optional

import httpx
import pendulum

from todosync.errors import RemoteError
from todosync.model.session import Session
from todosync.model.todo import Comment, Todo
from todosync.model.workspace import Workspace
from todosync.remote.codec import (
    comment_from_wire,
    new_todo_to_wire,
    todo_from_wire,
    todo_update_to_wire,
    workspace_from_wire,
)
from todosync.remote.service import NewTodo, TodoService

logger = logging.getLogger(__name__)

TODOS_PATH = "/api/todos"
COMMENTS_PATH = "/api/todos/comments"
WORKSPACES_PATH = "/api/workspaces"


class HttpTodoService(TodoService):
    """
    TodoService backed by the application's REST API.

    Mutations send JSON bodies, including DELETE, which is how the API
    expects them.
    """

    def __init__(
        self,
        base_url: str,
        session: Session,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={
                "Authorization": f"Bearer {session['token']}",
                "Accept": "application/json",
            },
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self, method: str, path: str, json: Optional[dict[str, Any]] = None
    ) -> Any:
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.HTTPError as e:
            raise RemoteError(f"{method} {path} failed: {e}") from e

        if response.is_error:
            raise RemoteError(
                f"{method} {path} returned {response.status_code}: {self.__error_message(response)}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise RemoteError(
                f"{method} {path} returned a body that is not JSON",
                status_code=response.status_code,
            ) from e

    def _decode[T](self, decode: Callable[[Any], T], payload: Any, what: str) -> T:
        try:
            return decode(payload)
        except (KeyError, TypeError, ValueError) as e:
            raise RemoteError(f"malformed {what} in response: {e}") from e

    def __error_message(self, response: httpx.Response) -> str:
        try:
            payload = response.json()
        except ValueError:
            return response.text[:200]
        if isinstance(payload, dict) and "error" in payload:
            return str(payload["error"])
        return str(payload)[:200]

    async def list_todos(self) -> list[Todo]:
        payload = await self._request("GET", TODOS_PATH)
        return self._decode(
            lambda raw: [todo_from_wire(todo) for todo in raw], payload, "todo list"
        )

    async def create_todo(self, new_todo: NewTodo) -> Todo:
        payload = await self._request("POST", TODOS_PATH, json=new_todo_to_wire(new_todo))
        return self._decode(todo_from_wire, payload, "todo")

    async def update_todo(
        self,
        id: str,
        completed: Optional[bool] = None,
        due_date: Optional[pendulum.DateTime] = None,
    ) -> Todo:
        payload = await self._request(
            "PUT", TODOS_PATH, json=todo_update_to_wire(id, completed, due_date)
        )
        return self._decode(todo_from_wire, payload, "todo")

    async def delete_todo(self, id: str) -> None:
        await self._request("DELETE", TODOS_PATH, json={"id": id})

    async def create_comment(self, todo_id: str, text: str) -> Comment:
        payload = await self._request(
            "POST", COMMENTS_PATH, json={"todoId": todo_id, "text": text}
        )
        return self._decode(comment_from_wire, payload, "comment")

    async def delete_comment(self, todo_id: str, comment_id: str) -> None:
        await self._request(
            "DELETE", COMMENTS_PATH, json={"todoId": todo_id, "commentId": comment_id}
        )

    async def list_workspaces(self) -> list[Workspace]:
        payload = await self._request("GET", WORKSPACES_PATH)
        return self._decode(
            lambda raw: [workspace_from_wire(workspace) for workspace in raw],
            payload,
            "workspace list",
        )

    async def create_workspace(self, name: str) -> Workspace:
        payload = await self._request("POST", WORKSPACES_PATH, json={"name": name})
        return self._decode(workspace_from_wire, payload, "workspace")

    async def delete_workspace(self, id: str) -> None:
        await self._request("DELETE", WORKSPACES_PATH, json={"id": id})
