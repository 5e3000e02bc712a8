# SPDX-License-Identifier: MIT

import asyncio
import logging
from typing import Annotated, Optional

import typer

from todosync.errors import RemoteError
from todosync.id_map import clear_id_map_if_required
from todosync.model.todo import Todo
from todosync.model.workspace import Workspace
from todosync.service.runtime import open_runtime
from todosync.terminal.common import (
    handle_errors,
    require_authenticated,
    resolve_workspace_id,
)
from todosync.terminal.custom_typer import AliasedTyperGroup
from todosync.view.workspace import workspaces_view

logger = logging.getLogger(__name__)

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)


@app.command("list, ls")
@handle_errors
def list_workspaces(
    offline: Annotated[
        bool, typer.Option("--offline", help="show the cached list without asking the remote")
    ] = False,
) -> None:
    """List workspaces with their open and completed todo counts."""

    async def _list() -> tuple[list[Workspace], Optional[Workspace], dict[str, list[Todo]]]:
        async with open_runtime() as runtime:
            if runtime.is_authenticated and not offline:
                try:
                    await runtime.workspaces.refresh()
                except RemoteError as e:
                    logger.warning("showing cached workspaces: %s", e)
            workspaces = runtime.workspaces.get_all_workspaces()
            todos = runtime.store.todos
            todos_by_workspace = {
                workspace["id"]: runtime.workspaces.todos_in(todos, workspace)
                for workspace in workspaces
            }
            return workspaces, runtime.workspaces.get_selected_workspace(), todos_by_workspace

    workspaces, selected, todos_by_workspace = asyncio.run(_list())
    clear_id_map_if_required()
    workspaces_view(workspaces, selected, todos_by_workspace)


@app.command("create, a", no_args_is_help=True)
@handle_errors
def create(name: str) -> None:
    """Create a workspace."""

    async def _create() -> Workspace:
        async with open_runtime() as runtime:
            require_authenticated(runtime)
            return await runtime.workspaces.create(name)

    workspace = asyncio.run(_create())
    typer.echo(f"created workspace {workspace['name']}")


@app.command("delete, rm", no_args_is_help=True)
@handle_errors
def delete(id: int) -> None:
    """Delete a workspace. Refused while it still holds open todos."""

    async def _delete() -> None:
        async with open_runtime() as runtime:
            require_authenticated(runtime)
            await runtime.workspaces.delete(resolve_workspace_id(id))

    asyncio.run(_delete())
    typer.echo(f"deleted workspace {id}")


@app.command("select, s")
@handle_errors
def select(
    id: Annotated[Optional[int], typer.Argument(help="workspace id, omit for Personal")] = None,
) -> None:
    """Select the workspace new todos go to and listings show."""

    async def _select() -> Optional[Workspace]:
        async with open_runtime() as runtime:
            workspace_id = resolve_workspace_id(id) if id is not None else None
            return runtime.workspaces.select(workspace_id)

    selected = asyncio.run(_select())
    typer.echo(f"selected workspace {selected['name'] if selected is not None else 'Personal'}")
