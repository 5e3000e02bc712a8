# SPDX-License-Identifier: MIT

from abc import ABC, abstractmethod
from typing import Optional

from todosync.model.todo import Todo
from todosync.time import datetime_to_iso_str_optional

DEFAULT_URGENCY = 1.0


def fingerprint(todo: Todo) -> str:
    """
    Content key used to decide whether a local and a remote todo are the same
    todo: lowercased trimmed title, due date and urgency joined by underscores.

    This is a heuristic merge key, not an identity. Unrelated todos that share
    title, due date and urgency collapse into one.
    """
    title = (todo.get("title") or "").strip().lower()
    due_date = datetime_to_iso_str_optional(todo.get("due_date")) or ""
    return f"{title}_{due_date}_{format_urgency(todo.get('urgency'))}"


def format_urgency(urgency: Optional[float]) -> str:
    # 2 and 2.0 must produce the same key
    if urgency is None:
        urgency = DEFAULT_URGENCY
    return f"{float(urgency):g}"


class Matcher(ABC):
    """Decides which local and remote todos describe the same todo."""

    @abstractmethod
    def key(self, todo: Todo) -> str: ...

    def index(self, todos: list[Todo]) -> dict[str, Todo]:
        """Map key to todo. On collisions the later todo in the list wins."""
        return {self.key(todo): todo for todo in todos}


class ContentFingerprintMatcher(Matcher):
    def key(self, todo: Todo) -> str:
        return fingerprint(todo)
