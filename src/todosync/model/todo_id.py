# SPDX-License-Identifier: MIT

import uuid
from typing import Literal, TypedDict, TypeIs


class PendingId(TypedDict):
    """Client-generated placeholder, valid until the remote assigns a real id."""

    state: Literal["pending"]
    value: str


class CommittedId(TypedDict):
    """Identifier assigned by the remote service."""

    state: Literal["committed"]
    value: str


type TodoId = PendingId | CommittedId

# Comments are created optimistically too, so they share the same two phases.
type CommentId = PendingId | CommittedId


def generate_pending_id() -> PendingId:
    return {"state": "pending", "value": str(uuid.uuid4())}


def committed_id(value: str) -> CommittedId:
    return {"state": "committed", "value": value}


def is_pending(id: TodoId) -> TypeIs[PendingId]:
    return id["state"] == "pending"


def is_committed(id: TodoId) -> TypeIs[CommittedId]:
    return id["state"] == "committed"


def same_id(left: TodoId, right: TodoId) -> bool:
    return left["state"] == right["state"] and left["value"] == right["value"]


def id_to_str(id: TodoId) -> str:
    return f"{id['state']}:{id['value']}"


def id_from_str(value: str) -> TodoId:
    state, _, raw = value.partition(":")
    if state == "pending":
        return {"state": "pending", "value": raw}
    if state == "committed":
        return {"state": "committed", "value": raw}
    raise ValueError(f"malformed id: {value!r}")
