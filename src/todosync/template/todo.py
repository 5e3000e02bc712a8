# SPDX-License-Identifier: MIT

from todosync.model.todo import LOCAL_USER_ID, Comment, Todo
from todosync.model.todo_id import TodoId, generate_pending_id
from todosync.time import now_utc


def get_todo_template() -> Todo:
    now = now_utc()
    return {
        "id": generate_pending_id(),
        "title": "",
        "due_date": None,
        "urgency": None,
        "completed": False,
        "workspace_id": None,
        "created_at": now,
        "updated_at": now,
        "comments": [],
        "user_id": LOCAL_USER_ID,
    }


def get_comment_template(todo_id: TodoId) -> Comment:
    return {
        "id": generate_pending_id(),
        "text": "",
        "todo_id": todo_id,
        "user_id": LOCAL_USER_ID,
        "created_at": now_utc(),
        "author": None,
    }
