# SPDX-License-Identifier: MIT

import atexit

from todosync.repository.configuration import CONFIGURATION_REPO
from todosync.repository.id_map import ID_MAP_REPO
from todosync.repository.migrate import MIGRATE_REPO


def flush() -> None:
    CONFIGURATION_REPO.flush()
    ID_MAP_REPO.flush()
    MIGRATE_REPO.flush()


def register_cleanup() -> None:
    atexit.register(flush)
