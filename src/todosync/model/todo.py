# SPDX-License-Identifier: MIT

from typing import Optional, TypedDict

import pendulum

from todosync.model.todo_id import CommentId, TodoId

LOCAL_USER_ID = "local"
LOCAL_USER_NAME = "Local User"


class CommentAuthor(TypedDict):
    name: str
    image: Optional[str]


class Comment(TypedDict):
    id: CommentId
    text: str
    todo_id: TodoId
    user_id: str
    created_at: pendulum.DateTime
    author: Optional[CommentAuthor]


class Todo(TypedDict):
    id: TodoId
    title: str
    due_date: Optional[pendulum.DateTime]
    urgency: Optional[float]
    completed: bool
    workspace_id: Optional[str]
    created_at: pendulum.DateTime
    updated_at: pendulum.DateTime
    comments: list[Comment]
    user_id: str
