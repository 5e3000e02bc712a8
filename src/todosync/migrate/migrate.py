# SPDX-License-Identifier: MIT

import logging

from todosync.migrate import registry
from todosync.repository.migrate import MIGRATE_REPO

logger = logging.getLogger(__name__)


def run_required_migrations() -> list[int]:
    """
    Apply every registered migration newer than the recorded version.

    Each migration is recorded and flushed as soon as it succeeds, so a
    failing migration is retried on the next start without re-running the
    ones before it. Returns the versions applied.
    """
    registry.discover()

    applied: list[int] = []
    for migration in registry.migrations_after(MIGRATE_REPO.get_version()):
        logger.info("running migration %d: %s", migration.version, migration.name)
        migration.run()
        MIGRATE_REPO.record(migration.version, migration.name)
        MIGRATE_REPO.flush()
        applied.append(migration.version)
    return applied
