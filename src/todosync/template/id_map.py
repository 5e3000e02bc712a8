# SPDX-License-Identifier: MIT

from todosync.model.id_map import IdMap


def get_id_map_template() -> IdMap:
    return {
        "todos": {"synthetic_to_real": {}, "real_to_synthetic": {}},
        "comments": {"synthetic_to_real": {}, "real_to_synthetic": {}},
        "workspaces": {"synthetic_to_real": {}, "real_to_synthetic": {}},
    }
