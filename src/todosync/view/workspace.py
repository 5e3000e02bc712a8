# SPDX-License-Identifier: MIT

from typing import Optional

from rich import box
from rich.console import Console
from rich.table import Table

from todosync.color import WORKSPACE_COLOR
from todosync.model.todo import Todo
from todosync.model.workspace import Workspace
from todosync.repository.id_map import ID_MAP_REPO
from todosync.view.header import header


def workspaces_view(
    workspaces: list[Workspace],
    selected: Optional[Workspace],
    todos_by_workspace: dict[str, list[Todo]],
) -> None:
    header(selected["name"] if selected is not None else None, "workspaces")

    workspaces_table = Table(box=box.SIMPLE)
    workspaces_table.add_column("id")
    workspaces_table.add_column("name")
    workspaces_table.add_column("open")
    workspaces_table.add_column("done")

    for workspace in workspaces:
        todos = todos_by_workspace.get(workspace["id"], [])
        name = workspace["name"]
        if selected is not None and selected["id"] == workspace["id"]:
            name = f"[{WORKSPACE_COLOR}]{name} *[/{WORKSPACE_COLOR}]"
        workspaces_table.add_row(
            str(ID_MAP_REPO.associate_id("workspaces", workspace["id"])),
            name,
            str(sum(1 for todo in todos if not todo["completed"])),
            str(sum(1 for todo in todos if todo["completed"])),
        )

    console = Console()
    console.print(workspaces_table)
