# SPDX-License-Identifier: MIT

from typing import Optional

import pendulum
from rich import box
from rich.console import Console
from rich.table import Table

from todosync.color import COMPLETED_TODO_COLOR, OVERDUE_COLOR, PENDING_TODO_COLOR, urgency_color
from todosync.model.todo import Comment, Todo
from todosync.model.todo_id import id_to_str, is_pending
from todosync.repository.id_map import ID_MAP_REPO
from todosync.sync.fingerprint import format_urgency
from todosync.time import (
    datetime_to_display_local_date_str_optional,
    datetime_to_display_local_datetime_str,
    now_utc,
)
from todosync.view.header import header


def sort_todos(todos: list[Todo]) -> list[Todo]:
    """Open todos first, then by due date (undated last), then most urgent."""
    far_future = pendulum.datetime(9999, 12, 31, tz="UTC")
    return sorted(
        todos,
        key=lambda todo: (
            todo["completed"],
            todo["due_date"] if todo["due_date"] is not None else far_future,
            -(todo["urgency"] if todo["urgency"] is not None else 1.0),
        ),
    )


def todo_synthetic_id(todo: Todo) -> int:
    return ID_MAP_REPO.associate_id("todos", id_to_str(todo["id"]))


def comment_synthetic_id(comment: Comment) -> int:
    return ID_MAP_REPO.associate_id("comments", id_to_str(comment["id"]))


def __state(todo: Todo) -> str:
    state = "x" if todo["completed"] else ""
    if is_pending(todo["id"]):
        state += f"[{PENDING_TODO_COLOR}]*[/{PENDING_TODO_COLOR}]"
    return state


def __due(todo: Todo) -> str:
    due = datetime_to_display_local_date_str_optional(todo["due_date"]) or ""
    if (
        due != ""
        and not todo["completed"]
        and todo["due_date"] is not None
        and todo["due_date"] < now_utc().start_of("day")
    ):
        return f"[{OVERDUE_COLOR}]{due}[/{OVERDUE_COLOR}]"
    return due


def __urgency(todo: Todo) -> str:
    if todo["urgency"] is None:
        return ""
    return f"[{urgency_color(todo['urgency'])}]{format_urgency(todo['urgency'])}[/{urgency_color(todo['urgency'])}]"


def todos_table_view(workspace_name: Optional[str], todos: list[Todo]) -> None:
    header(workspace_name, "todos")

    todos_table = Table(box=box.SIMPLE)
    todos_table.add_column("id")
    todos_table.add_column("done")
    todos_table.add_column("urgency")
    todos_table.add_column("due")
    todos_table.add_column("title")
    todos_table.add_column("comments")

    for todo in sort_todos(todos):
        row = [
            str(todo_synthetic_id(todo)),
            __state(todo),
            __urgency(todo),
            __due(todo),
            todo["title"],
            str(len(todo["comments"])) if todo["comments"] else "",
        ]
        if todo["completed"]:
            row = [f"[{COMPLETED_TODO_COLOR}]{value}[/{COMPLETED_TODO_COLOR}]" for value in row]
        todos_table.add_row(*row)

    console = Console()
    console.print(todos_table)


def todos_list_view(workspace_name: Optional[str], todos: list[Todo]) -> None:
    header(workspace_name, "todos")

    console = Console()
    console.print()
    for todo in sort_todos(todos):
        check = "[x]" if todo["completed"] else "[ ]"
        line = f"{todo_synthetic_id(todo):>3} {check} {todo['title']}"
        details = [value for value in (__due(todo), __urgency(todo)) if value != ""]
        if details:
            line += "  " + "  ".join(details)
        if is_pending(todo["id"]):
            line += f" [{PENDING_TODO_COLOR}](not synced)[/{PENDING_TODO_COLOR}]"
        if todo["completed"]:
            line = f"[{COMPLETED_TODO_COLOR}]{line}[/{COMPLETED_TODO_COLOR}]"
        console.print(line, highlight=False)
    if not todos:
        console.print(" nothing to do", style=COMPLETED_TODO_COLOR)


def single_todo_view(workspace_name: Optional[str], todo: Todo) -> None:
    header(workspace_name, "todo")

    todo_table = Table(box=box.SIMPLE)
    todo_table.add_column("property")
    todo_table.add_column("value")

    todo_table.add_row("id", str(todo_synthetic_id(todo)))
    todo_table.add_row("synced", "no" if is_pending(todo["id"]) else "yes")
    todo_table.add_row("title", todo["title"])
    todo_table.add_row("completed", "yes" if todo["completed"] else "no")
    todo_table.add_row("due", datetime_to_display_local_date_str_optional(todo["due_date"]) or "")
    todo_table.add_row("urgency", __urgency(todo))
    todo_table.add_row("created", datetime_to_display_local_datetime_str(todo["created_at"]))
    todo_table.add_row("updated", datetime_to_display_local_datetime_str(todo["updated_at"]))

    console = Console()
    console.print(todo_table)

    if todo["comments"]:
        comments_view(todo["comments"])


def comments_view(comments: list[Comment]) -> None:
    comments_table = Table(box=box.SIMPLE)
    comments_table.add_column("id")
    comments_table.add_column("author")
    comments_table.add_column("created")
    comments_table.add_column("comment")

    for comment in comments:
        author = comment["author"]["name"] if comment["author"] is not None else ""
        if is_pending(comment["id"]):
            author += f" [{PENDING_TODO_COLOR}]*[/{PENDING_TODO_COLOR}]"
        comments_table.add_row(
            str(comment_synthetic_id(comment)),
            author,
            datetime_to_display_local_datetime_str(comment["created_at"]),
            comment["text"],
        )

    console = Console()
    console.print(comments_table)
