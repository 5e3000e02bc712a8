# SPDX-License-Identifier: MIT

import asyncio
from typing import Annotated, Optional

import pendulum
import typer

from todosync.id_map import clear_id_map_if_required
from todosync.model.todo import Todo
from todosync.service.runtime import open_runtime
from todosync.terminal.common import (
    fail,
    find_todo,
    handle_errors,
    resolve_workspace_id,
    workspace_name,
)
from todosync.terminal.parse import DATE_HELP, parse_datetime
from todosync.terminal.validate import validate_urgency
from todosync.view import todo as todo_view


@handle_errors
def add(
    title: str,
    due: Annotated[
        Optional[pendulum.DateTime],
        typer.Option("--due", "-u", parser=parse_datetime, help=DATE_HELP),
    ] = None,
    urgency: Annotated[
        Optional[float],
        typer.Option(
            "--urgency",
            "-r",
            callback=validate_urgency,
            help="valid input: 1-5, one decimal (5=most urgent)",
        ),
    ] = None,
    workspace: Annotated[
        Optional[int],
        typer.Option("--workspace", "-w", help="workspace id, defaults to the selected one"),
    ] = None,
) -> None:
    """Add a todo. It is saved locally right away and uploaded when signed in."""

    async def _add() -> tuple[Optional[Todo], Optional[str]]:
        async with open_runtime() as runtime:
            if workspace is not None:
                workspace_id: Optional[str] = resolve_workspace_id(workspace)
            else:
                selected = runtime.workspaces.get_selected_workspace()
                workspace_id = selected["id"] if selected is not None else None
            todo = await runtime.reconciler.add_todo(title, due, urgency, workspace_id)
            return todo, workspace_name(runtime)

    todo, name = asyncio.run(_add())
    if todo is None:
        fail("the todo could not be saved remotely and was discarded")
    todo_view.single_todo_view(name, todo)


@handle_errors
def done(id: int) -> None:
    """Toggle a todo between open and completed."""

    async def _done() -> tuple[Optional[Todo], Optional[str]]:
        async with open_runtime() as runtime:
            todo = find_todo(runtime, id)
            toggled = await runtime.reconciler.toggle_todo(todo["id"])
            if toggled is not None and toggled["completed"] == todo["completed"]:
                fail("the change could not be saved remotely and was undone")
            return toggled, workspace_name(runtime)

    todo, name = asyncio.run(_done())
    if todo is not None:
        todo_view.single_todo_view(name, todo)


@handle_errors
def reschedule(
    id: int,
    due: Annotated[
        Optional[pendulum.DateTime],
        typer.Argument(parser=parse_datetime, help=DATE_HELP),
    ],
) -> None:
    """Change the due date of a todo."""

    async def _reschedule() -> tuple[Optional[Todo], Optional[str]]:
        async with open_runtime() as runtime:
            todo = find_todo(runtime, id)
            rescheduled = await runtime.reconciler.reschedule_todo(todo["id"], due)
            if rescheduled is not None and rescheduled["due_date"] != due:
                fail("the new due date could not be saved remotely and was undone")
            return rescheduled, workspace_name(runtime)

    todo, name = asyncio.run(_reschedule())
    if todo is not None:
        todo_view.single_todo_view(name, todo)


@handle_errors
def delete(id: int) -> None:
    """Delete a todo."""

    async def _delete() -> bool:
        async with open_runtime() as runtime:
            todo = find_todo(runtime, id)
            return await runtime.reconciler.delete_todo(todo["id"])

    if not asyncio.run(_delete()):
        fail("the todo could not be deleted remotely and was restored")
    typer.echo(f"deleted todo {id}")


@handle_errors
def list_todos(
    all_workspaces: Annotated[
        bool, typer.Option("--all", "-a", help="show todos of every workspace")
    ] = False,
    show_completed: Annotated[
        Optional[bool],
        typer.Option(
            "--show-completed/--hide-completed",
            help="override the saved view preference for this listing",
        ),
    ] = None,
) -> None:
    """List todos of the selected workspace."""

    async def _list() -> tuple[list[Todo], Optional[str], bool]:
        async with open_runtime() as runtime:
            todos = runtime.store.todos
            if not all_workspaces:
                todos = runtime.workspaces.todos_in(
                    todos, runtime.workspaces.get_selected_workspace()
                )
            include_completed = (
                show_completed
                if show_completed is not None
                else runtime.local_state.show_completed.value
            )
            if not include_completed:
                todos = [todo for todo in todos if not todo["completed"]]
            name = "all workspaces" if all_workspaces else workspace_name(runtime)
            return todos, name, runtime.local_state.is_table_view.value

    todos, name, is_table_view = asyncio.run(_list())
    clear_id_map_if_required()
    if is_table_view:
        todo_view.todos_table_view(name, todos)
    else:
        todo_view.todos_list_view(name, todos)
