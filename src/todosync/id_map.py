# SPDX-License-Identifier: MIT

from todosync import state as app_state
from todosync.repository.id_map import ID_MAP_REPO


def clear_id_map_if_required() -> None:
    if app_state.get_clear_ids():
        ID_MAP_REPO.clear_ids()
