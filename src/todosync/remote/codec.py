# SPDX-License-Identifier: MIT

from typing import Any, Optional

from todosync import time
from todosync.model.todo import Comment, CommentAuthor, Todo
from todosync.model.todo_id import committed_id
from todosync.model.workspace import Workspace
from todosync.remote.service import NewTodo


def comment_from_wire(raw_comment: dict[str, Any]) -> Comment:
    author: Optional[CommentAuthor] = None
    raw_user = raw_comment.get("user")
    if isinstance(raw_user, dict):
        author = {"name": raw_user.get("name") or "User", "image": raw_user.get("image")}
    return {
        "id": committed_id(str(raw_comment["id"])),
        "text": str(raw_comment["text"]),
        "todo_id": committed_id(str(raw_comment["todoId"])),
        "user_id": str(raw_comment.get("userId") or ""),
        "created_at": time.datetime_from_str(raw_comment["createdAt"]),
        "author": author,
    }


def todo_from_wire(raw_todo: dict[str, Any]) -> Todo:
    created_at = time.datetime_from_str(raw_todo["createdAt"])
    updated_at = time.datetime_from_str_optional(raw_todo.get("updatedAt")) or created_at
    urgency = raw_todo.get("urgency")
    return {
        "id": committed_id(str(raw_todo["id"])),
        "title": str(raw_todo["title"]),
        "due_date": time.datetime_from_str_optional(raw_todo.get("dueDate")),
        "urgency": float(urgency) if urgency is not None else None,
        "completed": bool(raw_todo.get("completed", False)),
        "workspace_id": raw_todo.get("workspaceId"),
        "created_at": created_at,
        "updated_at": updated_at,
        "comments": [comment_from_wire(comment) for comment in raw_todo.get("comments") or []],
        "user_id": str(raw_todo.get("userId") or ""),
    }


def workspace_from_wire(raw_workspace: dict[str, Any]) -> Workspace:
    created_at = time.datetime_from_str(raw_workspace["createdAt"])
    return {
        "id": str(raw_workspace["id"]),
        "name": str(raw_workspace["name"]),
        "owner_id": raw_workspace.get("ownerId"),
        "created_at": created_at,
        "updated_at": time.datetime_from_str_optional(raw_workspace.get("updatedAt"))
        or created_at,
    }


def new_todo_to_wire(new_todo: NewTodo) -> dict[str, Any]:
    body: dict[str, Any] = {
        "title": new_todo["title"],
        "dueDate": time.datetime_to_iso_str_optional(new_todo["due_date"]),
        "urgency": new_todo["urgency"],
        "completed": new_todo["completed"],
    }
    if new_todo["workspace_id"] is not None:
        body["workspaceId"] = new_todo["workspace_id"]
    return body


def todo_update_to_wire(
    id: str,
    completed: Optional[bool],
    due_date: Optional[Any],
) -> dict[str, Any]:
    body: dict[str, Any] = {"id": id}
    if completed is not None:
        body["completed"] = completed
    if due_date is not None:
        body["dueDate"] = time.datetime_to_iso_str(due_date)
    return body
