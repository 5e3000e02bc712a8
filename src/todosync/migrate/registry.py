# SPDX-License-Identifier: MIT

import importlib
import pkgutil
from typing import Callable, NamedTuple

MIGRATIONS_PACKAGE = "todosync.migrate.migrations"


class Migration(NamedTuple):
    version: int
    name: str
    run: Callable[[], None]


MIGRATIONS: dict[int, Migration] = {}


def migration(version: int, name: str) -> Callable[[Callable[[], None]], Callable[[], None]]:
    """Register a data migration. Versions are applied in ascending order, once."""

    def wrapper(func: Callable[[], None]) -> Callable[[], None]:
        registered = MIGRATIONS.get(version)
        if registered is not None and registered.name != name:
            raise ValueError(
                f"migration {version} is registered twice: {registered.name!r} and {name!r}"
            )
        MIGRATIONS[version] = Migration(version, name, func)
        return func

    return wrapper


def discover(package_name: str = MIGRATIONS_PACKAGE) -> None:
    package = importlib.import_module(package_name)
    for module in pkgutil.iter_modules(package.__path__):
        importlib.import_module(f"{package_name}.{module.name}")


def migrations_after(version: int) -> list[Migration]:
    return sorted(
        (migration for migration in MIGRATIONS.values() if migration.version > version),
        key=lambda migration: migration.version,
    )
