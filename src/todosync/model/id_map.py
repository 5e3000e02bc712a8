# SPDX-License-Identifier: MIT

from typing import Literal, TypedDict

EntityType = Literal[
    "todos",
    "comments",
    "workspaces",
]


type IdMapDict = dict[EntityType, IdMapMapping]


class IdMap(TypedDict):
    """
    All dictionaries are mapped in the following way:

    Synthetic id : real entity id.

    This means that if you want to know the real id of an entity, and you have its synthetic id,
    then you index into the dictionary with the synthetic id.

    Real ids are stored in their "state:value" string form (see todo_id.id_to_str)
    so that a pending todo and its committed replacement get distinct numbers.

    Example:

    Todo with an id of committed:8f1c...
    Synthetic id for that todo is 7.

    real_todo_id = id_map["todos"]["synthetic_to_real"][7] # returns "committed:8f1c..."
    """

    todos: "IdMapMapping"
    comments: "IdMapMapping"
    workspaces: "IdMapMapping"


class IdMapMapping(TypedDict):
    synthetic_to_real: dict[int, str]
    real_to_synthetic: dict[str, int]
