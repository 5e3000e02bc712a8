# SPDX-License-Identifier: MIT

from typing import Annotated, Optional

import typer
from rich.console import Console

from todosync.repository.local_state import LocalState


def view(
    show_completed: Annotated[
        Optional[bool],
        typer.Option("--show-completed/--hide-completed", help="include completed todos"),
    ] = None,
    table: Annotated[
        Optional[bool],
        typer.Option("--table/--list", help="render todos as a table or a list"),
    ] = None,
) -> None:
    """Show or change how todos are listed. The choice is remembered."""
    local_state = LocalState()
    local_state.mount()

    if show_completed is not None:
        local_state.show_completed.set(show_completed)
    if table is not None:
        local_state.is_table_view.set(table)

    console = Console()
    console.print(
        f"completed todos: {'shown' if local_state.show_completed.value else 'hidden'}"
    )
    console.print(f"layout: {'table' if local_state.is_table_view.value else 'list'}")
