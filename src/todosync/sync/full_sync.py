# SPDX-License-Identifier: MIT

import asyncio
import logging
from typing import Callable, Optional, cast

from todosync.errors import RemoteError
from todosync.model.action import ActionType
from todosync.model.sync_report import SyncReport
from todosync.model.todo import Comment, Todo
from todosync.model.todo_id import id_to_str, is_pending, same_id
from todosync.remote.service import TodoService
from todosync.sync.fingerprint import ContentFingerprintMatcher, Matcher
from todosync.sync.gate import SyncGate
from todosync.sync.store import TodoStore

logger = logging.getLogger(__name__)


def deduplicate(todos: list[Todo], matcher: Matcher) -> list[Todo]:
    """
    Keep one todo per matcher key.

    The survivor is the todo with the latest updated_at; on equal updated_at
    the later one in the list wins. Survivors keep the position of the first
    todo with their key.
    """
    survivors: dict[str, Todo] = {}
    for todo in todos:
        key = matcher.key(todo)
        current = survivors.get(key)
        if current is None or todo["updated_at"] >= current["updated_at"]:
            survivors[key] = todo
    return list(survivors.values())


class FullSync:
    """
    Converges the local collection with the remote one.

    A pass patches completion state where local and remote copies of the
    same todo disagree (local wins), uploads local-only todos, then replaces
    the local collection with the deduplicated remote collection. Local-only
    todos whose upload failed are kept, and todos whose create is still in
    flight are carried over untouched.
    """

    def __init__(
        self,
        store: TodoStore,
        service: TodoService,
        gate: SyncGate,
        matcher: Optional[Matcher] = None,
        inflight_pending_ids: Callable[[], set[str]] = set,
    ) -> None:
        self.store = store
        self.service = service
        self.gate = gate
        self.matcher = matcher if matcher is not None else ContentFingerprintMatcher()
        self._inflight_pending_ids = inflight_pending_ids

    async def run(self) -> Optional[SyncReport]:
        """Return None if the pass was abandoned before changing anything."""
        async with self.gate.full_sync():
            return await self.__run()

    async def __run(self) -> Optional[SyncReport]:
        try:
            remote_todos = await self.service.list_todos()
        except RemoteError as e:
            logger.error("full sync aborted, cannot fetch remote todos: %s", e)
            return None

        remote_index = self.matcher.index(remote_todos)
        inflight = self._inflight_pending_ids()

        patches: list[tuple[Todo, bool]] = []
        uploads: list[Todo] = []
        for todo in self.store.todos:
            if is_pending(todo["id"]) and todo["id"]["value"] in inflight:
                continue
            remote_todo = remote_index.get(self.matcher.key(todo))
            if remote_todo is None:
                uploads.append(todo)
            elif remote_todo["completed"] != todo["completed"]:
                patches.append((remote_todo, todo["completed"]))

        results = await asyncio.gather(
            *[self.__patch(remote_todo, completed) for remote_todo, completed in patches],
            *[self.__upload(todo) for todo in uploads],
        )
        patch_results = results[: len(patches)]
        upload_results = results[len(patches) :]
        failed_uploads = [
            todo for todo, uploaded in zip(uploads, upload_results) if not uploaded
        ]

        try:
            final_todos = await self.service.list_todos()
        except RemoteError as e:
            logger.error("full sync could not re-fetch remote todos, local state kept: %s", e)
            return {
                "patched": sum(1 for result in patch_results if result),
                "uploaded": sum(1 for result in upload_results if result),
                "failed": sum(1 for result in results if not result) + 1,
                "retained": len(self.store.todos),
                "duplicates_removed": 0,
                "total": len(self.store.todos),
            }

        unique_todos = deduplicate(final_todos, self.matcher)
        merged = self.__merge_local(unique_todos, failed_uploads)

        self.store.dispatch({"action_type": ActionType.REPLACE_ALL, "todos": merged})

        report: SyncReport = {
            "patched": sum(1 for result in patch_results if result),
            "uploaded": sum(1 for result in upload_results if result),
            "failed": sum(1 for result in results if not result),
            "retained": len(merged) - len(unique_todos),
            "duplicates_removed": len(final_todos) - len(unique_todos),
            "total": len(merged),
        }
        logger.info(
            "full sync: %d patched, %d uploaded, %d failed, %d retained, %d duplicate(s) removed",
            report["patched"],
            report["uploaded"],
            report["failed"],
            report["retained"],
            report["duplicates_removed"],
        )
        return report

    async def __patch(self, remote_todo: Todo, completed: bool) -> bool:
        try:
            await self.service.update_todo(remote_todo["id"]["value"], completed=completed)
        except RemoteError as e:
            logger.error(
                "full sync failed to patch todo %s: %s", id_to_str(remote_todo["id"]), e
            )
            return False
        return True

    async def __upload(self, todo: Todo) -> bool:
        try:
            await self.service.create_todo(
                {
                    "title": todo["title"],
                    "due_date": todo["due_date"],
                    "urgency": todo["urgency"],
                    "completed": todo["completed"],
                    "workspace_id": todo["workspace_id"],
                }
            )
        except RemoteError as e:
            logger.error("full sync failed to upload todo %r: %s", todo["title"], e)
            return False
        return True

    def __merge_local(self, unique_todos: list[Todo], failed_uploads: list[Todo]) -> list[Todo]:
        """
        Add back what the remote snapshot cannot contain: todos and comments
        whose create is still in flight, and local-only todos that failed to
        upload.
        """
        inflight = self._inflight_pending_ids()
        current = self.store.todos
        keys = {self.matcher.key(todo) for todo in unique_todos}

        merged: list[Todo] = []
        for remote_todo in unique_todos:
            local_todo = next(
                (todo for todo in current if same_id(todo["id"], remote_todo["id"])), None
            )
            inflight_comments: list[Comment] = []
            if local_todo is not None:
                inflight_comments = [
                    comment
                    for comment in local_todo["comments"]
                    if is_pending(comment["id"]) and comment["id"]["value"] in inflight
                ]
            if inflight_comments:
                remote_todo = cast(
                    Todo,
                    {**remote_todo, "comments": [*remote_todo["comments"], *inflight_comments]},
                )
            merged.append(remote_todo)

        for todo in current:
            if is_pending(todo["id"]) and todo["id"]["value"] in inflight:
                merged.append(todo)

        for failed in failed_uploads:
            # Deleted locally while the pass was running
            todo = next((todo for todo in current if same_id(todo["id"], failed["id"])), None)
            if todo is None:
                continue
            key = self.matcher.key(todo)
            if key in keys:
                continue
            if any(same_id(todo["id"], kept["id"]) for kept in merged):
                continue
            logger.warning("keeping local-only todo %r until its upload succeeds", todo["title"])
            keys.add(key)
            merged.append(todo)

        return merged
