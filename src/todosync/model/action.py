# SPDX-License-Identifier: MIT

from enum import StrEnum
from typing import Any, NotRequired, Optional, TypedDict

import pendulum

from todosync.model.todo import Comment, Todo
from todosync.model.todo_id import CommentId, PendingId, TodoId


class ActionType(StrEnum):
    ADD_TODO = "add_todo"
    COMMIT_TODO = "commit_todo"
    DISCARD_TODO = "discard_todo"
    REMOVE_TODO = "remove_todo"
    RESTORE_TODO = "restore_todo"
    SET_COMPLETED = "set_completed"
    SET_DUE_DATE = "set_due_date"
    REVERT_FIELDS = "revert_fields"
    REPLACE_TODO = "replace_todo"
    ADD_COMMENT = "add_comment"
    COMMIT_COMMENT = "commit_comment"
    REMOVE_COMMENT = "remove_comment"
    RESTORE_COMMENT = "restore_comment"
    REPLACE_ALL = "replace_all"


class Action(TypedDict):
    action_type: ActionType


class AddTodoAction(Action):
    todo: Todo


class CommitTodoAction(Action):
    pending_id: PendingId
    todo: Todo
    # The pending record as it was sent to create_todo
    submitted: NotRequired[Todo]


class TodoIdAction(Action):
    """Shared shape of DISCARD_TODO and REMOVE_TODO."""

    todo_id: TodoId


class RestoreTodoAction(Action):
    todo: Todo


class SetCompletedAction(Action):
    todo_id: TodoId
    completed: bool
    updated_at: pendulum.DateTime


class SetDueDateAction(Action):
    todo_id: TodoId
    due_date: Optional[pendulum.DateTime]
    updated_at: pendulum.DateTime


class RevertFieldsAction(Action):
    """
    Restore the named fields of one todo.

    updated_at is only restored when the record still carries the
    optimistic stamp, so an unrelated later change keeps its timestamp.
    """

    todo_id: TodoId
    fields: dict[str, Any]
    optimistic_updated_at: pendulum.DateTime
    previous_updated_at: pendulum.DateTime


class ReplaceTodoAction(Action):
    todo_id: TodoId
    todo: Todo


class AddCommentAction(Action):
    todo_id: TodoId
    comment: Comment


class CommitCommentAction(Action):
    todo_id: TodoId
    pending_id: PendingId
    comment: Comment


class RemoveCommentAction(Action):
    todo_id: TodoId
    comment_id: CommentId


class RestoreCommentAction(Action):
    todo_id: TodoId
    comment: Comment
    index: int


class ReplaceAllAction(Action):
    todos: list[Todo]


Actions = (
    AddTodoAction
    | CommitTodoAction
    | TodoIdAction
    | RestoreTodoAction
    | SetCompletedAction
    | SetDueDateAction
    | RevertFieldsAction
    | ReplaceTodoAction
    | AddCommentAction
    | CommitCommentAction
    | RemoveCommentAction
    | RestoreCommentAction
    | ReplaceAllAction
)
