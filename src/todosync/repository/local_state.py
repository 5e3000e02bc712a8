# SPDX-License-Identifier: MIT

import logging
from typing import Optional

from todosync.model.todo import Todo
from todosync.model.workspace import Workspace
from todosync.repository.persistent_value import PersistentValue
from todosync.repository.serialize import (
    convert_bool_for_deserialization,
    convert_optional_str_for_deserialization,
    convert_todos_for_deserialization,
    convert_todos_for_serialization,
    convert_workspaces_for_deserialization,
    convert_workspaces_for_serialization,
)

logger = logging.getLogger(__name__)


class LocalState:
    """
    The per-device state of the application.

    Every value is stored independently so that a corrupt file only costs
    that one value.
    """

    def __init__(self) -> None:
        self.todos: PersistentValue[list[Todo]] = PersistentValue(
            "todos",
            [],
            serialize=convert_todos_for_serialization,
            deserialize=convert_todos_for_deserialization,
        )
        self.show_completed: PersistentValue[bool] = PersistentValue(
            "show_completed", False, deserialize=convert_bool_for_deserialization
        )
        self.is_table_view: PersistentValue[bool] = PersistentValue(
            "is_table_view", False, deserialize=convert_bool_for_deserialization
        )
        self.selected_workspace: PersistentValue[Optional[str]] = PersistentValue(
            "selected_workspace",
            None,
            deserialize=convert_optional_str_for_deserialization,
        )
        self.workspaces: PersistentValue[list[Workspace]] = PersistentValue(
            "workspaces",
            [],
            serialize=convert_workspaces_for_serialization,
            deserialize=convert_workspaces_for_deserialization,
        )

    def mount(self) -> None:
        self.todos.mount()
        self.show_completed.mount()
        self.is_table_view.mount()
        self.selected_workspace.mount()
        self.workspaces.mount()

    def clear_user_data(self) -> None:
        """
        Forget everything that belongs to the signed-in user.

        View preferences survive so that anonymous use keeps its layout.
        """
        self.todos.clear()
        self.workspaces.clear()
        self.selected_workspace.clear()
        logger.info("cleared cached todos, workspaces and workspace selection")
