# SPDX-License-Identifier: MIT

from typing import Optional

from rich import print
from rich.padding import Padding

from todosync.color import WORKSPACE_COLOR
from todosync.view.state import get_show_header


def header(workspace_name: Optional[str], sub_header: Optional[str] = None) -> None:
    """Print the application header with the active workspace.

    Args:
        workspace_name: Name of the selected workspace, None when signed out
        sub_header: Optional sub-header text to display
    """
    if not get_show_header():
        return

    additional = ""
    if sub_header is not None:
        additional = f"[sandy_brown]{sub_header}[/sandy_brown]"
    workspace = f"[{WORKSPACE_COLOR}]{workspace_name or 'local'}[/{WORKSPACE_COLOR}]"

    print(Padding("[dark_orange]todosync[/dark_orange]", (1, 0, 0, 1)))
    print(Padding(additional, (0, 1)))
    print(Padding(workspace, (0, 1)))
