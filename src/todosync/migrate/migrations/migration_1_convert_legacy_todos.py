# SPDX-License-Identifier: MIT

import datetime
import logging
from typing import Any, Optional

from yaml import dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Dumper, Loader  # type: ignore[assignment]

from todosync import configuration, time
from todosync.migrate.registry import migration
from todosync.model.todo import LOCAL_USER_ID, LOCAL_USER_NAME

logger = logging.getLogger(__name__)


def _to_iso(value: Any) -> str:
    if value is None:
        return time.datetime_to_iso_str(time.now_utc())
    if isinstance(value, (datetime.datetime, datetime.date)):
        return value.isoformat()
    return str(value)


def _to_iso_due_date(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    try:
        return time.datetime_to_iso_str(time.datetime_from_str(_to_iso(value)))
    except (ValueError, TypeError):
        # Free-text dates from the old input box cannot be recovered
        logger.warning("migration 1: dropping unparseable due date %r", value)
        return None


def is_legacy_todo(todo: Any) -> bool:
    return isinstance(todo, dict) and "text" in todo and "title" not in todo


def convert_legacy_todo(legacy_todo: dict[str, Any]) -> dict[str, Any]:
    """
    Convert {id, text, date, urgency, completed, createdAt, comments} into the
    current on-disk todo layout.

    Legacy todos were never confirmed by the server, so their ids become
    pending ids and the next full sync uploads them.
    """
    todo_id = {"state": "pending", "value": str(legacy_todo["id"])}
    created_at = _to_iso(legacy_todo.get("createdAt") or legacy_todo.get("created_at"))
    comments = []
    for legacy_comment in legacy_todo.get("comments") or []:
        comments.append(
            {
                "id": {"state": "pending", "value": str(legacy_comment["id"])},
                "text": legacy_comment["text"],
                "todo_id": dict(todo_id),
                "user_id": LOCAL_USER_ID,
                "created_at": _to_iso(legacy_comment.get("createdAt") or created_at),
                "author": {"name": LOCAL_USER_NAME, "image": None},
            }
        )
    return {
        "id": todo_id,
        "title": legacy_todo["text"],
        "due_date": _to_iso_due_date(legacy_todo.get("date")),
        "urgency": legacy_todo.get("urgency"),
        "completed": bool(legacy_todo.get("completed", False)),
        "workspace_id": None,
        "created_at": created_at,
        # updated_at was not tracked before
        "updated_at": created_at,
        "comments": comments,
        "user_id": LOCAL_USER_ID,
    }


@migration(1, "convert legacy todos")
def migrate() -> None:
    file_path = configuration.DATA_STATE_DIR / "todos.yaml"
    if not file_path.exists():
        logger.info("migration 1: todos.yaml not found, skipping")
        return

    data = load(file_path.read_text(), Loader=Loader)
    # The legacy layout stored a bare list instead of {"value": [...]}
    if isinstance(data, list):
        data = {"value": data}
    if not isinstance(data, dict) or not isinstance(data.get("value"), list):
        logger.warning("migration 1: todos.yaml has an unknown layout, skipping")
        return

    converted_count = 0
    todos = []
    for todo in data["value"]:
        if is_legacy_todo(todo):
            todos.append(convert_legacy_todo(todo))
            converted_count += 1
        else:
            todos.append(todo)

    file_path.write_text(dump({"value": todos}, Dumper=Dumper))
    logger.info("migration 1: converted %d legacy todo(s)", converted_count)
