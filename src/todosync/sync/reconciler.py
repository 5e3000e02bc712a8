# SPDX-License-Identifier: MIT

import asyncio
import logging
from typing import Optional, cast

import pendulum

from todosync.errors import RemoteError, ValidationError
from todosync.model.action import ActionType
from todosync.model.session import Session
from todosync.model.todo import LOCAL_USER_ID, LOCAL_USER_NAME, Comment, Todo
from todosync.model.todo_id import (
    CommentId,
    CommittedId,
    PendingId,
    TodoId,
    id_to_str,
    is_committed,
    same_id,
)
from todosync.remote.service import TodoService
from todosync.sync.gate import SyncGate
from todosync.sync.store import TodoStore
from todosync.template.todo import get_comment_template, get_todo_template
from todosync.time import now_utc

logger = logging.getLogger(__name__)

MIN_URGENCY = 1.0
MAX_URGENCY = 5.0


def validate_title(title: Optional[str]) -> str:
    if title is None or title.strip() == "":
        raise ValidationError("title must not be empty")
    return title.strip()


def validate_urgency(urgency: Optional[float]) -> Optional[float]:
    if urgency is None:
        return None
    if not (MIN_URGENCY <= urgency <= MAX_URGENCY):
        raise ValidationError(
            f"urgency must be between {MIN_URGENCY:g} and {MAX_URGENCY:g} (inclusive)"
        )
    return round(float(urgency), 1)


class TodoReconciler:
    """
    Optimistic handlers for every user action on todos and comments.

    Each handler applies its change to the store at once, then, when a
    session exists, makes the matching remote call. A successful response
    replaces the local record; a failed one undoes exactly the local change.
    Remote failures are logged and never raised: the handlers return the
    record as it stands afterwards, or None when it no longer exists.
    """

    def __init__(
        self,
        store: TodoStore,
        service: Optional[TodoService] = None,
        session: Optional[Session] = None,
        gate: Optional[SyncGate] = None,
    ) -> None:
        self.store = store
        self.service = service
        self.session = session
        self.gate = gate if gate is not None else SyncGate()
        # pending id value -> committed id once the create settles (None if it failed)
        self._pending_commits: dict[str, asyncio.Future[Optional[CommittedId]]] = {}

    @property
    def is_authenticated(self) -> bool:
        return self.session is not None and self.service is not None

    def inflight_pending_ids(self) -> set[str]:
        return set(self._pending_commits.keys())

    async def add_todo(
        self,
        title: str,
        due_date: Optional[pendulum.DateTime] = None,
        urgency: Optional[float] = None,
        workspace_id: Optional[str] = None,
    ) -> Optional[Todo]:
        todo = get_todo_template()
        todo["title"] = validate_title(title)
        todo["due_date"] = due_date
        todo["urgency"] = validate_urgency(urgency)
        todo["workspace_id"] = workspace_id
        todo["user_id"] = self.session["user_id"] if self.session is not None else LOCAL_USER_ID
        pending_id = cast(PendingId, todo["id"])

        self.store.dispatch({"action_type": ActionType.ADD_TODO, "todo": todo})

        if not self.is_authenticated:
            return self.store.get_todo(pending_id)

        commit = self.__begin_commit(pending_id)
        try:
            async with self.gate.remote_call():
                server_todo = await self.__service.create_todo(
                    {
                        "title": todo["title"],
                        "due_date": todo["due_date"],
                        "urgency": todo["urgency"],
                        "completed": todo["completed"],
                        "workspace_id": todo["workspace_id"],
                    }
                )
        except RemoteError as e:
            logger.error("failed to add todo %r: %s", todo["title"], e)
            # It never existed remotely, so it is dropped rather than reverted
            self.store.dispatch(
                {"action_type": ActionType.DISCARD_TODO, "todo_id": pending_id}
            )
            return None
        else:
            self.store.dispatch(
                {
                    "action_type": ActionType.COMMIT_TODO,
                    "pending_id": pending_id,
                    "todo": server_todo,
                    "submitted": todo,
                }
            )
            commit.set_result(cast(CommittedId, server_todo["id"]))
            return self.store.get_todo(server_todo["id"])
        finally:
            self.__end_commit(pending_id, commit)

    async def toggle_todo(self, todo_id: TodoId) -> Optional[Todo]:
        todo = self.store.get_todo(todo_id)
        if todo is None:
            logger.warning("cannot toggle unknown todo %s", id_to_str(todo_id))
            return None

        previous_completed = todo["completed"]
        stamp = now_utc()
        self.store.dispatch(
            {
                "action_type": ActionType.SET_COMPLETED,
                "todo_id": todo_id,
                "completed": not previous_completed,
                "updated_at": stamp,
            }
        )

        remote_id = await self.__remote_id(todo_id)
        if remote_id is None:
            return self.store.get_todo(todo_id)

        try:
            async with self.gate.remote_call():
                server_todo = await self.__service.update_todo(
                    remote_id["value"], completed=not previous_completed
                )
        except RemoteError as e:
            logger.error("failed to toggle todo %s: %s", id_to_str(remote_id), e)
            self.__revert_fields(
                remote_id, {"completed": previous_completed}, stamp, todo["updated_at"]
            )
            return self.store.get_todo(remote_id)

        self.__replace(remote_id, server_todo)
        return self.store.get_todo(remote_id)

    async def reschedule_todo(
        self, todo_id: TodoId, due_date: pendulum.DateTime
    ) -> Optional[Todo]:
        todo = self.store.get_todo(todo_id)
        if todo is None:
            logger.warning("cannot reschedule unknown todo %s", id_to_str(todo_id))
            return None

        previous_due_date = todo["due_date"]
        stamp = now_utc()
        self.store.dispatch(
            {
                "action_type": ActionType.SET_DUE_DATE,
                "todo_id": todo_id,
                "due_date": due_date,
                "updated_at": stamp,
            }
        )

        remote_id = await self.__remote_id(todo_id)
        if remote_id is None:
            return self.store.get_todo(todo_id)

        try:
            async with self.gate.remote_call():
                server_todo = await self.__service.update_todo(
                    remote_id["value"], due_date=due_date
                )
        except RemoteError as e:
            logger.error("failed to reschedule todo %s: %s", id_to_str(remote_id), e)
            self.__revert_fields(
                remote_id, {"due_date": previous_due_date}, stamp, todo["updated_at"]
            )
            return self.store.get_todo(remote_id)

        if server_todo["due_date"] == due_date:
            self.__replace(remote_id, server_todo)
        else:
            # Recoverable: the optimistic value stays until the next full sync
            logger.warning(
                "server due date for todo %s does not match the requested date (requested %s, received %s)",
                id_to_str(remote_id),
                due_date,
                server_todo["due_date"],
            )
        return self.store.get_todo(remote_id)

    async def delete_todo(self, todo_id: TodoId) -> bool:
        """Return True if the todo is gone afterwards."""
        todo = self.store.get_todo(todo_id)
        if todo is None:
            logger.warning("cannot delete unknown todo %s", id_to_str(todo_id))
            return False

        self.store.dispatch({"action_type": ActionType.REMOVE_TODO, "todo_id": todo_id})

        remote_id = await self.__remote_id(todo_id)
        if remote_id is None:
            return True

        try:
            async with self.gate.remote_call():
                await self.__service.delete_todo(remote_id["value"])
        except RemoteError as e:
            logger.error("failed to delete todo %s: %s", id_to_str(remote_id), e)
            # Position is not restored
            self.store.dispatch(
                {
                    "action_type": ActionType.RESTORE_TODO,
                    "todo": cast(Todo, {**todo, "id": remote_id}),
                }
            )
            return False

        # A full sync that ran meanwhile may have brought it back
        self.store.dispatch({"action_type": ActionType.REMOVE_TODO, "todo_id": remote_id})
        return True

    async def add_comment(self, todo_id: TodoId, text: str) -> Optional[Comment]:
        todo = self.store.get_todo(todo_id)
        if todo is None:
            logger.warning("cannot comment on unknown todo %s", id_to_str(todo_id))
            return None
        if text.strip() == "":
            raise ValidationError("comment must not be empty")

        comment = get_comment_template(todo_id)
        comment["text"] = text
        if self.session is not None:
            comment["user_id"] = self.session["user_id"]
            comment["author"] = {"name": self.session["name"] or "User", "image": None}
        else:
            comment["author"] = {"name": LOCAL_USER_NAME, "image": None}
        pending_id = cast(PendingId, comment["id"])

        self.store.dispatch(
            {"action_type": ActionType.ADD_COMMENT, "todo_id": todo_id, "comment": comment}
        )

        remote_todo_id = await self.__remote_id(todo_id)
        if remote_todo_id is None:
            return self.__find_comment(todo_id, pending_id)

        commit = self.__begin_commit(pending_id)
        try:
            async with self.gate.remote_call():
                server_comment = await self.__service.create_comment(
                    remote_todo_id["value"], text
                )
        except RemoteError as e:
            logger.error("failed to add comment to todo %s: %s", id_to_str(remote_todo_id), e)
            self.store.dispatch(
                {
                    "action_type": ActionType.REMOVE_COMMENT,
                    "todo_id": remote_todo_id,
                    "comment_id": pending_id,
                }
            )
            return None
        else:
            self.store.dispatch(
                {
                    "action_type": ActionType.COMMIT_COMMENT,
                    "todo_id": remote_todo_id,
                    "pending_id": pending_id,
                    "comment": server_comment,
                }
            )
            commit.set_result(cast(CommittedId, server_comment["id"]))
            return self.__find_comment(remote_todo_id, server_comment["id"])
        finally:
            self.__end_commit(pending_id, commit)

    async def delete_comment(self, todo_id: TodoId, comment_id: CommentId) -> bool:
        """Return True if the comment is gone afterwards."""
        todo = self.store.get_todo(todo_id)
        if todo is None:
            logger.warning("cannot delete comment of unknown todo %s", id_to_str(todo_id))
            return False
        index = next(
            (
                position
                for position, comment in enumerate(todo["comments"])
                if same_id(comment["id"], comment_id)
            ),
            None,
        )
        if index is None:
            logger.warning("todo %s has no comment %s", id_to_str(todo_id), id_to_str(comment_id))
            return False
        comment = todo["comments"][index]

        self.store.dispatch(
            {
                "action_type": ActionType.REMOVE_COMMENT,
                "todo_id": todo_id,
                "comment_id": comment_id,
            }
        )

        remote_todo_id = await self.__remote_id(todo_id)
        remote_comment_id = await self.__remote_id(comment_id)
        if remote_todo_id is None or remote_comment_id is None:
            return True

        try:
            async with self.gate.remote_call():
                await self.__service.delete_comment(
                    remote_todo_id["value"], remote_comment_id["value"]
                )
        except RemoteError as e:
            logger.error(
                "failed to delete comment %s of todo %s: %s",
                id_to_str(remote_comment_id),
                id_to_str(remote_todo_id),
                e,
            )
            self.store.dispatch(
                {
                    "action_type": ActionType.RESTORE_COMMENT,
                    "todo_id": remote_todo_id,
                    "comment": cast(
                        Comment,
                        {**comment, "id": remote_comment_id, "todo_id": remote_todo_id},
                    ),
                    "index": index,
                }
            )
            return False
        return True

    @property
    def __service(self) -> TodoService:
        if self.service is None:
            raise RuntimeError("no remote service configured")
        return self.service

    def __begin_commit(self, pending_id: PendingId) -> asyncio.Future[Optional[CommittedId]]:
        commit: asyncio.Future[Optional[CommittedId]] = (
            asyncio.get_running_loop().create_future()
        )
        self._pending_commits[pending_id["value"]] = commit
        return commit

    def __end_commit(
        self, pending_id: PendingId, commit: asyncio.Future[Optional[CommittedId]]
    ) -> None:
        self._pending_commits.pop(pending_id["value"], None)
        # Waiters must not hang when the create failed or was cancelled
        if not commit.done():
            commit.set_result(None)

    async def __remote_id(self, id: TodoId) -> Optional[CommittedId]:
        """
        The id the remote knows the record by, or None if the remote call
        must be skipped: no session, a local-only record, or a create that
        failed.
        """
        if not self.is_authenticated:
            return None
        if is_committed(id):
            return id
        commit = self._pending_commits.get(id["value"])
        if commit is None:
            logger.debug("%s is local-only, the next full sync uploads it", id_to_str(id))
            return None
        return await commit

    def __revert_fields(
        self,
        todo_id: TodoId,
        fields: dict[str, object],
        optimistic_updated_at: pendulum.DateTime,
        previous_updated_at: pendulum.DateTime,
    ) -> None:
        self.store.dispatch(
            {
                "action_type": ActionType.REVERT_FIELDS,
                "todo_id": todo_id,
                "fields": fields,
                "optimistic_updated_at": optimistic_updated_at,
                "previous_updated_at": previous_updated_at,
            }
        )

    def __replace(self, todo_id: TodoId, todo: Todo) -> None:
        self.store.dispatch(
            {"action_type": ActionType.REPLACE_TODO, "todo_id": todo_id, "todo": todo}
        )

    def __find_comment(self, todo_id: TodoId, comment_id: CommentId) -> Optional[Comment]:
        todo = self.store.get_todo(todo_id)
        if todo is None:
            return None
        for comment in todo["comments"]:
            if same_id(comment["id"], comment_id):
                return comment
        return None
