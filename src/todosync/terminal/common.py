# SPDX-License-Identifier: MIT

from functools import wraps
from typing import Any, Callable, NoReturn, Optional, TypeVar

import typer
from rich.console import Console

from todosync.color import ERROR_COLOR
from todosync.errors import NotAuthenticatedError, TodosyncError, UnknownIdError
from todosync.model.todo import Todo
from todosync.model.todo_id import CommentId, TodoId, id_from_str
from todosync.repository.id_map import ID_MAP_REPO
from todosync.service.runtime import Runtime

F = TypeVar("F", bound=Callable[..., Any])

err_console = Console(stderr=True)


def handle_errors(func: F) -> F:
    """Turn a TodosyncError raised by a command into a red message and exit code 1."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except TodosyncError as e:
            fail(str(e))

    return wrapper  # type: ignore[return-value]


def fail(message: str) -> NoReturn:
    err_console.print(f"[{ERROR_COLOR}]{message}[/{ERROR_COLOR}]", highlight=False)
    raise typer.Exit(code=1)


def resolve_todo_id(synthetic_id: int) -> TodoId:
    return id_from_str(ID_MAP_REPO.get_real_id("todos", synthetic_id))


def resolve_comment_id(synthetic_id: int) -> CommentId:
    return id_from_str(ID_MAP_REPO.get_real_id("comments", synthetic_id))


def resolve_workspace_id(synthetic_id: int) -> str:
    return ID_MAP_REPO.get_real_id("workspaces", synthetic_id)


def require_authenticated(runtime: Runtime) -> None:
    if not runtime.is_authenticated:
        raise NotAuthenticatedError("not signed in, run `todosync login` first")


def workspace_name(runtime: Runtime) -> Optional[str]:
    selected = runtime.workspaces.get_selected_workspace()
    return selected["name"] if selected is not None else None


def find_todo(runtime: Runtime, synthetic_id: int) -> Todo:
    """The todo behind a displayed id; ids go stale once a todo is synced or removed."""
    todo = runtime.store.get_todo(resolve_todo_id(synthetic_id))
    if todo is None:
        raise UnknownIdError("todos", synthetic_id)
    return todo
