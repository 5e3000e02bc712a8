# SPDX-License-Identifier: MIT

import logging
from typing import Optional

from todosync.errors import RemoteError
from todosync.model.session import Session
from todosync.model.sync_report import SyncReport
from todosync.remote.service import TodoService
from todosync.repository.local_state import LocalState
from todosync.repository.session import SESSION_REPO
from todosync.service.runtime import open_runtime

logger = logging.getLogger(__name__)


async def sign_in(
    session: Session,
    service: Optional[TodoService] = None,
    local_state: Optional[LocalState] = None,
) -> Optional[SyncReport]:
    """
    Store the session and start it: make sure the Personal workspace exists,
    then run the first full sync so todos created while signed out are
    uploaded.
    """
    SESSION_REPO.save_session(session)
    async with open_runtime(session, service, local_state) as runtime:
        try:
            await runtime.workspaces.ensure_personal()
        except RemoteError as e:
            logger.warning("could not load workspaces: %s", e)
        if runtime.full_sync is None:
            return None
        return await runtime.full_sync.run()


async def sign_out(local_state: Optional[LocalState] = None) -> None:
    """
    Forget the session and every cached piece of the user's data, so the
    next user of this device (signed in or not) starts clean.
    """
    SESSION_REPO.delete_session()
    async with open_runtime(local_state=local_state) as runtime:
        runtime.clear_user_data()
    logger.info("signed out")
