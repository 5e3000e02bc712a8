# SPDX-License-Identifier: MIT

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from todosync.model.action import ActionType
from todosync.model.session import Session
from todosync.remote.http import HttpTodoService
from todosync.remote.service import TodoService
from todosync.repository.configuration import CONFIGURATION_REPO
from todosync.repository.local_state import LocalState
from todosync.repository.session import SESSION_REPO
from todosync.service.workspace import WorkspaceService
from todosync.sync.full_sync import FullSync
from todosync.sync.gate import SyncGate
from todosync.sync.reconciler import TodoReconciler
from todosync.sync.scheduler import ReportCallback, SyncScheduler
from todosync.sync.store import TodoStore

logger = logging.getLogger(__name__)


class Runtime:
    """
    Everything one session of the application works with, wired together:
    the mounted local state, the store that owns the todos, and, when signed
    in, the remote service, the reconciler and the full sync.
    """

    def __init__(
        self,
        local_state: LocalState,
        session: Optional[Session] = None,
        service: Optional[TodoService] = None,
    ) -> None:
        self.local_state = local_state
        self.session = session
        self.service = service

        self.store = TodoStore(local_state.todos.value)
        self.store.subscribe(local_state.todos.set)
        self.gate = SyncGate()
        self.reconciler = TodoReconciler(self.store, service, session, self.gate)
        self.workspaces = WorkspaceService(local_state, self.store, service)
        self.full_sync: Optional[FullSync] = None
        if service is not None:
            self.full_sync = FullSync(
                self.store,
                service,
                self.gate,
                inflight_pending_ids=self.reconciler.inflight_pending_ids,
            )

    @property
    def is_authenticated(self) -> bool:
        return self.reconciler.is_authenticated

    def create_scheduler(
        self, interval_seconds: float, on_report: Optional[ReportCallback] = None
    ) -> Optional[SyncScheduler]:
        if self.full_sync is None:
            return None
        return SyncScheduler(self.full_sync, interval_seconds, on_report)

    def clear_user_data(self) -> None:
        self.store.dispatch({"action_type": ActionType.REPLACE_ALL, "todos": []})
        self.local_state.clear_user_data()

    async def aclose(self) -> None:
        if self.service is not None:
            await self.service.aclose()


def create_service(session: Session) -> TodoService:
    config = CONFIGURATION_REPO.get_config()
    return HttpTodoService(
        CONFIGURATION_REPO.get_api_base_url(),
        session,
        timeout=config["request_timeout_seconds"],
    )


@asynccontextmanager
async def open_runtime(
    session: Optional[Session] = None,
    service: Optional[TodoService] = None,
    local_state: Optional[LocalState] = None,
) -> AsyncIterator[Runtime]:
    """
    Mount local state and build a Runtime for the stored session (or the
    given one). Without a session the runtime works in local-only mode.
    """
    if session is None:
        session = SESSION_REPO.get_session()
    if session is not None and service is None:
        service = create_service(session)

    if local_state is None:
        local_state = LocalState()
        local_state.mount()

    runtime = Runtime(local_state, session, service)
    try:
        yield runtime
    finally:
        await runtime.aclose()
