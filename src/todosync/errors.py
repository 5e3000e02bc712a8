# SPDX-License-Identifier: MIT

from typing import Optional


class TodosyncError(Exception):
    """Base class for every error todosync raises on purpose."""


class RemoteError(TodosyncError):
    """A call to the remote todo service failed (transport, status or body)."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ValidationError(TodosyncError):
    pass


class NotAuthenticatedError(TodosyncError):
    pass


class WorkspaceNotEmptyError(TodosyncError):
    def __init__(self, workspace_name: str, incomplete_count: int) -> None:
        super().__init__(
            f"workspace '{workspace_name}' still has {incomplete_count} incomplete todo(s)"
        )
        self.workspace_name = workspace_name
        self.incomplete_count = incomplete_count


class UnknownIdError(TodosyncError):
    def __init__(self, entity_type: str, synthetic_id: int) -> None:
        super().__init__(f"no {entity_type} with id {synthetic_id}")
        self.entity_type = entity_type
        self.synthetic_id = synthetic_id
