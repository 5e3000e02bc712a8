# SPDX-License-Identifier: MIT

import logging
from typing import Optional

from todosync.errors import NotAuthenticatedError, ValidationError, WorkspaceNotEmptyError
from todosync.model.todo import Todo
from todosync.model.workspace import PERSONAL_WORKSPACE_NAME, Workspace
from todosync.remote.service import TodoService
from todosync.repository.local_state import LocalState
from todosync.sync.store import TodoStore

logger = logging.getLogger(__name__)


def is_personal(workspace: Workspace) -> bool:
    return workspace["name"] == PERSONAL_WORKSPACE_NAME


class WorkspaceService:
    """
    Workspaces of the signed-in user.

    Unlike todos, workspace changes are not optimistic: they go to the remote
    first and RemoteError propagates to the caller. The local list is a cache
    used for display and for filtering todos offline.
    """

    def __init__(
        self,
        local_state: LocalState,
        store: TodoStore,
        service: Optional[TodoService] = None,
    ) -> None:
        self.local_state = local_state
        self.store = store
        self.service = service

    def get_all_workspaces(self) -> list[Workspace]:
        return list(self.local_state.workspaces.value)

    def get_workspace(self, id: str) -> Optional[Workspace]:
        for workspace in self.local_state.workspaces.value:
            if workspace["id"] == id:
                return workspace
        return None

    def get_personal_workspace(self) -> Optional[Workspace]:
        for workspace in self.local_state.workspaces.value:
            if is_personal(workspace):
                return workspace
        return None

    def get_selected_workspace(self) -> Optional[Workspace]:
        """The selected workspace, falling back to Personal."""
        selected_id = self.local_state.selected_workspace.value
        if selected_id is not None:
            selected = self.get_workspace(selected_id)
            if selected is not None:
                return selected
        return self.get_personal_workspace()

    async def refresh(self) -> list[Workspace]:
        workspaces = await self.__require_service().list_workspaces()
        self.local_state.workspaces.set(workspaces)
        return list(workspaces)

    async def ensure_personal(self) -> Workspace:
        await self.refresh()
        personal = self.get_personal_workspace()
        if personal is not None:
            return personal
        logger.info("creating the %s workspace", PERSONAL_WORKSPACE_NAME)
        return await self.create(PERSONAL_WORKSPACE_NAME)

    async def create(self, name: str) -> Workspace:
        name = name.strip()
        if name == "":
            raise ValidationError("workspace name must not be empty")
        workspace = await self.__require_service().create_workspace(name)
        self.local_state.workspaces.set([*self.local_state.workspaces.value, workspace])
        return workspace

    async def delete(self, id: str) -> None:
        workspace = self.get_workspace(id)
        if workspace is None:
            await self.refresh()
            workspace = self.get_workspace(id)
        if workspace is None:
            raise ValidationError(f"unknown workspace {id}")
        if is_personal(workspace):
            raise ValidationError(f"the {PERSONAL_WORKSPACE_NAME} workspace cannot be deleted")

        incomplete = [
            todo
            for todo in self.todos_in(self.store.todos, workspace)
            if not todo["completed"]
        ]
        if incomplete:
            raise WorkspaceNotEmptyError(workspace["name"], len(incomplete))

        await self.__require_service().delete_workspace(id)
        self.local_state.workspaces.set(
            [existing for existing in self.local_state.workspaces.value if existing["id"] != id]
        )
        if self.local_state.selected_workspace.value == id:
            self.local_state.selected_workspace.set(None)

    def select(self, id: Optional[str]) -> Optional[Workspace]:
        """Select a workspace by id, or None for Personal."""
        if id is not None and self.get_workspace(id) is None:
            raise ValidationError(f"unknown workspace {id}")
        self.local_state.selected_workspace.set(id)
        return self.get_selected_workspace()

    def todos_in(self, todos: list[Todo], workspace: Optional[Workspace]) -> list[Todo]:
        """
        Todos contained in a workspace. A todo without a workspace belongs to
        Personal; workspace None also means Personal.
        """
        if workspace is None or is_personal(workspace):
            personal_id = workspace["id"] if workspace is not None else None
            return [
                todo
                for todo in todos
                if todo["workspace_id"] is None or todo["workspace_id"] == personal_id
            ]
        return [todo for todo in todos if todo["workspace_id"] == workspace["id"]]

    def __require_service(self) -> TodoService:
        if self.service is None:
            raise NotAuthenticatedError("sign in to manage workspaces")
        return self.service
