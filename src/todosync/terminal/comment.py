# SPDX-License-Identifier: MIT

import asyncio
from typing import Optional

import typer

from todosync.model.todo import Todo
from todosync.service.runtime import open_runtime
from todosync.terminal.common import (
    fail,
    find_todo,
    handle_errors,
    resolve_comment_id,
    workspace_name,
)
from todosync.terminal.custom_typer import AliasedTyperGroup
from todosync.view import todo as todo_view

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)


@app.command("add, a", no_args_is_help=True)
@handle_errors
def add(id: int, text: str) -> None:
    """Comment on a todo."""

    async def _add() -> tuple[Optional[Todo], Optional[str]]:
        async with open_runtime() as runtime:
            todo = find_todo(runtime, id)
            comment = await runtime.reconciler.add_comment(todo["id"], text)
            if comment is None:
                fail("the comment could not be saved remotely and was discarded")
            return runtime.store.get_todo(comment["todo_id"]), workspace_name(runtime)

    todo, name = asyncio.run(_add())
    if todo is not None:
        todo_view.single_todo_view(name, todo)


@app.command("delete, rm", no_args_is_help=True)
@handle_errors
def delete(id: int, comment_id: int) -> None:
    """Delete a comment from a todo."""

    async def _delete() -> bool:
        async with open_runtime() as runtime:
            todo = find_todo(runtime, id)
            return await runtime.reconciler.delete_comment(
                todo["id"], resolve_comment_id(comment_id)
            )

    if not asyncio.run(_delete()):
        fail("the comment could not be deleted remotely and was restored")
    typer.echo(f"deleted comment {comment_id}")
