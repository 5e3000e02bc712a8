# SPDX-License-Identifier: MIT

from todosync.model.migrate import Migrate


def get_migrate_template() -> Migrate:
    return {"version": 0, "applied": []}
