# SPDX-License-Identifier: MIT

import logging
from copy import deepcopy
from typing import Any, Callable, Optional, cast

from todosync.model.action import (
    Actions,
    ActionType,
    AddCommentAction,
    AddTodoAction,
    CommitCommentAction,
    CommitTodoAction,
    RemoveCommentAction,
    ReplaceAllAction,
    ReplaceTodoAction,
    RestoreCommentAction,
    RestoreTodoAction,
    RevertFieldsAction,
    SetCompletedAction,
    SetDueDateAction,
    TodoIdAction,
)
from todosync.model.todo import Comment, Todo
from todosync.model.todo_id import TodoId, is_pending, same_id

logger = logging.getLogger(__name__)

type Subscriber = Callable[[list[Todo]], None]

# Fields the optimistic handlers change on an existing todo
EDITABLE_FIELDS = ("completed", "due_date")


def reduce(todos: list[Todo], action: Actions) -> list[Todo]:
    """
    Return the collection that results from applying one action.

    Never mutates the input list or the records in it. Actions that refer to
    a todo or comment that is not present leave the collection unchanged.
    """
    match action["action_type"]:
        case ActionType.ADD_TODO:
            return [*todos, cast(AddTodoAction, action)["todo"]]
        case ActionType.COMMIT_TODO:
            return __commit_todo(todos, cast(CommitTodoAction, action))
        case ActionType.DISCARD_TODO | ActionType.REMOVE_TODO:
            todo_id = cast(TodoIdAction, action)["todo_id"]
            return [todo for todo in todos if not same_id(todo["id"], todo_id)]
        case ActionType.RESTORE_TODO:
            restored = cast(RestoreTodoAction, action)["todo"]
            if __find_index(todos, restored["id"]) is not None:
                return list(todos)
            return [*todos, restored]
        case ActionType.SET_COMPLETED:
            set_completed = cast(SetCompletedAction, action)
            return __update_todo(
                todos,
                set_completed["todo_id"],
                {
                    "completed": set_completed["completed"],
                    "updated_at": set_completed["updated_at"],
                },
            )
        case ActionType.SET_DUE_DATE:
            set_due_date = cast(SetDueDateAction, action)
            return __update_todo(
                todos,
                set_due_date["todo_id"],
                {
                    "due_date": set_due_date["due_date"],
                    "updated_at": set_due_date["updated_at"],
                },
            )
        case ActionType.REVERT_FIELDS:
            return __revert_fields(todos, cast(RevertFieldsAction, action))
        case ActionType.REPLACE_TODO:
            return __replace_todo(todos, cast(ReplaceTodoAction, action))
        case ActionType.ADD_COMMENT:
            add_comment = cast(AddCommentAction, action)
            return __update_comments(
                todos,
                add_comment["todo_id"],
                lambda comments: [*comments, add_comment["comment"]],
            )
        case ActionType.COMMIT_COMMENT:
            commit_comment = cast(CommitCommentAction, action)
            return __update_comments(
                todos,
                commit_comment["todo_id"],
                lambda comments: [
                    commit_comment["comment"]
                    if same_id(comment["id"], commit_comment["pending_id"])
                    else comment
                    for comment in comments
                ],
            )
        case ActionType.REMOVE_COMMENT:
            remove_comment = cast(RemoveCommentAction, action)
            return __update_comments(
                todos,
                remove_comment["todo_id"],
                lambda comments: [
                    comment
                    for comment in comments
                    if not same_id(comment["id"], remove_comment["comment_id"])
                ],
            )
        case ActionType.RESTORE_COMMENT:
            return __restore_comment(todos, cast(RestoreCommentAction, action))
        case ActionType.REPLACE_ALL:
            return list(cast(ReplaceAllAction, action)["todos"])
    raise ValueError(f"unknown action type: {action['action_type']}")


def __find_index(todos: list[Todo], todo_id: TodoId) -> Optional[int]:
    for index, todo in enumerate(todos):
        if same_id(todo["id"], todo_id):
            return index
    return None


def __update_todo(todos: list[Todo], todo_id: TodoId, fields: dict[str, object]) -> list[Todo]:
    return [
        cast(Todo, {**todo, **fields}) if same_id(todo["id"], todo_id) else todo
        for todo in todos
    ]


def __update_comments(
    todos: list[Todo],
    todo_id: TodoId,
    update: Callable[[list[Comment]], list[Comment]],
) -> list[Todo]:
    return [
        cast(Todo, {**todo, "comments": update(todo["comments"])})
        if same_id(todo["id"], todo_id)
        else todo
        for todo in todos
    ]


def __commit_todo(todos: list[Todo], action: CommitTodoAction) -> list[Todo]:
    index = __find_index(todos, action["pending_id"])
    if index is None:
        return list(todos)

    pending = todos[index]
    server_todo = action["todo"]
    # Comments attached while the create was in flight now point at the server id
    carried_comments = [
        cast(Comment, {**comment, "todo_id": server_todo["id"]})
        for comment in pending["comments"]
    ]
    # Edits made while the create was in flight stay until their own call settles
    local_edits: dict[str, Any] = {}
    submitted = action.get("submitted")
    if submitted is not None:
        for field in EDITABLE_FIELDS:
            if pending[field] != submitted[field]:
                local_edits[field] = pending[field]
        if local_edits:
            local_edits["updated_at"] = pending["updated_at"]
    committed = cast(
        Todo,
        {
            **server_todo,
            **local_edits,
            "comments": [*server_todo["comments"], *carried_comments],
        },
    )
    return [*todos[:index], committed, *todos[index + 1 :]]


def __revert_fields(todos: list[Todo], action: RevertFieldsAction) -> list[Todo]:
    result: list[Todo] = []
    for todo in todos:
        if not same_id(todo["id"], action["todo_id"]):
            result.append(todo)
            continue
        reverted = cast(Todo, {**todo, **action["fields"]})
        if todo["updated_at"] == action["optimistic_updated_at"]:
            reverted["updated_at"] = action["previous_updated_at"]
        result.append(reverted)
    return result


def __replace_todo(todos: list[Todo], action: ReplaceTodoAction) -> list[Todo]:
    result: list[Todo] = []
    for todo in todos:
        if not same_id(todo["id"], action["todo_id"]):
            result.append(todo)
            continue
        # The server does not know about comments that are still being created
        unconfirmed = [comment for comment in todo["comments"] if is_pending(comment["id"])]
        replacement = action["todo"]
        result.append(
            cast(Todo, {**replacement, "comments": [*replacement["comments"], *unconfirmed]})
        )
    return result


def __restore_comment(todos: list[Todo], action: RestoreCommentAction) -> list[Todo]:
    def restore(comments: list[Comment]) -> list[Comment]:
        if any(same_id(comment["id"], action["comment"]["id"]) for comment in comments):
            return list(comments)
        index = min(max(action["index"], 0), len(comments))
        return [*comments[:index], action["comment"], *comments[index:]]

    return __update_comments(todos, action["todo_id"], restore)


class TodoStore:
    """
    Owner of the todo collection.

    Every change goes through dispatch(), which replaces the collection with
    the result of reduce() and then notifies subscribers. dispatch() never
    suspends, so on a single event loop two dispatches cannot interleave.
    """

    def __init__(self, todos: Optional[list[Todo]] = None) -> None:
        self._todos: list[Todo] = list(todos) if todos is not None else []
        self._subscribers: list[Subscriber] = []

    @property
    def todos(self) -> list[Todo]:
        return deepcopy(self._todos)

    def get_todo(self, todo_id: TodoId) -> Optional[Todo]:
        for todo in self._todos:
            if same_id(todo["id"], todo_id):
                return deepcopy(todo)
        return None

    def subscribe(self, subscriber: Subscriber) -> Callable[[], None]:
        self._subscribers.append(subscriber)

        def unsubscribe() -> None:
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)

        return unsubscribe

    def dispatch(self, action: Actions) -> None:
        self._todos = reduce(self._todos, action)
        logger.debug("dispatched %s, %d todo(s)", action["action_type"], len(self._todos))
        for subscriber in list(self._subscribers):
            subscriber(self.todos)
