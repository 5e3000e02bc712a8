# SPDX-License-Identifier: MIT

from copy import deepcopy
from typing import Any, Optional, cast

from todosync import time
from todosync.model.todo import Comment, CommentAuthor, Todo
from todosync.model.todo_id import TodoId
from todosync.model.workspace import Workspace


def convert_id_for_serialization(id: TodoId) -> dict[str, Any]:
    return {"state": id["state"], "value": id["value"]}


def convert_id_for_deserialization(raw_id: Any) -> TodoId:
    if not isinstance(raw_id, dict):
        raise ValueError(f"malformed id: {raw_id!r}")
    if raw_id.get("state") not in ("pending", "committed"):
        raise ValueError(f"unknown id state: {raw_id.get('state')!r}")
    if not isinstance(raw_id.get("value"), str):
        raise ValueError(f"malformed id value: {raw_id.get('value')!r}")
    return cast(TodoId, {"state": raw_id["state"], "value": raw_id["value"]})


def convert_comment_for_serialization(comment: Comment) -> dict[str, Any]:
    serializable_comment = cast(dict[str, Any], deepcopy(comment))
    serializable_comment["id"] = convert_id_for_serialization(comment["id"])
    serializable_comment["todo_id"] = convert_id_for_serialization(comment["todo_id"])
    serializable_comment["created_at"] = time.datetime_to_iso_str(comment["created_at"])
    return serializable_comment


def convert_comment_for_deserialization(comment: dict[str, Any]) -> Comment:
    author: Optional[CommentAuthor] = None
    if comment.get("author") is not None:
        author = {
            "name": str(comment["author"]["name"]),
            "image": comment["author"].get("image"),
        }
    return {
        "id": convert_id_for_deserialization(comment["id"]),
        "text": str(comment["text"]),
        "todo_id": convert_id_for_deserialization(comment["todo_id"]),
        "user_id": str(comment["user_id"]),
        "created_at": time.datetime_from_str(comment["created_at"]),
        "author": author,
    }


def convert_todo_for_serialization(todo: Todo) -> dict[str, Any]:
    serializable_todo = cast(dict[str, Any], deepcopy(todo))
    serializable_todo["id"] = convert_id_for_serialization(todo["id"])
    serializable_todo["due_date"] = time.datetime_to_iso_str_optional(todo["due_date"])
    serializable_todo["created_at"] = time.datetime_to_iso_str(todo["created_at"])
    serializable_todo["updated_at"] = time.datetime_to_iso_str(todo["updated_at"])
    serializable_todo["comments"] = [
        convert_comment_for_serialization(comment) for comment in todo["comments"]
    ]
    return serializable_todo


def convert_todo_for_deserialization(todo: dict[str, Any]) -> Todo:
    urgency = todo.get("urgency")
    return {
        "id": convert_id_for_deserialization(todo["id"]),
        "title": str(todo["title"]),
        "due_date": time.datetime_from_str_optional(todo.get("due_date")),
        "urgency": float(urgency) if urgency is not None else None,
        "completed": bool(todo["completed"]),
        "workspace_id": todo.get("workspace_id"),
        "created_at": time.datetime_from_str(todo["created_at"]),
        "updated_at": time.datetime_from_str(todo["updated_at"]),
        "comments": [
            convert_comment_for_deserialization(comment)
            for comment in todo.get("comments") or []
        ],
        "user_id": str(todo["user_id"]),
    }


def convert_todos_for_serialization(todos: list[Todo]) -> list[dict[str, Any]]:
    return [convert_todo_for_serialization(todo) for todo in todos]


def convert_todos_for_deserialization(raw_todos: Any) -> list[Todo]:
    if not isinstance(raw_todos, list):
        raise ValueError(f"expected a list of todos, got {type(raw_todos).__name__}")
    return [convert_todo_for_deserialization(todo) for todo in raw_todos]


def convert_workspace_for_serialization(workspace: Workspace) -> dict[str, Any]:
    serializable_workspace = cast(dict[str, Any], deepcopy(workspace))
    serializable_workspace["created_at"] = time.datetime_to_iso_str(workspace["created_at"])
    serializable_workspace["updated_at"] = time.datetime_to_iso_str(workspace["updated_at"])
    return serializable_workspace


def convert_workspace_for_deserialization(workspace: dict[str, Any]) -> Workspace:
    return {
        "id": str(workspace["id"]),
        "name": str(workspace["name"]),
        "owner_id": workspace.get("owner_id"),
        "created_at": time.datetime_from_str(workspace["created_at"]),
        "updated_at": time.datetime_from_str(workspace["updated_at"]),
    }


def convert_workspaces_for_serialization(workspaces: list[Workspace]) -> list[dict[str, Any]]:
    return [convert_workspace_for_serialization(workspace) for workspace in workspaces]


def convert_workspaces_for_deserialization(raw_workspaces: Any) -> list[Workspace]:
    if not isinstance(raw_workspaces, list):
        raise ValueError(
            f"expected a list of workspaces, got {type(raw_workspaces).__name__}"
        )
    return [convert_workspace_for_deserialization(workspace) for workspace in raw_workspaces]


def convert_bool_for_deserialization(raw_value: Any) -> bool:
    if not isinstance(raw_value, bool):
        raise ValueError(f"expected a boolean, got {raw_value!r}")
    return raw_value


def convert_optional_str_for_deserialization(raw_value: Any) -> Optional[str]:
    if raw_value is not None and not isinstance(raw_value, str):
        raise ValueError(f"expected a string, got {raw_value!r}")
    return raw_value
