# SPDX-License-Identifier: MIT

from copy import deepcopy
from typing import Optional

from yaml import dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Dumper, Loader  # type: ignore[assignment]

from todosync import configuration, time
from todosync.model.migrate import AppliedMigration, Migrate
from todosync.template.migrate import get_migrate_template


class MigrateRepository:
    """Which data migrations have run on this device, kept in migrate.yaml."""

    def __init__(self) -> None:
        self._migrate_data: Optional[Migrate] = None
        self.is_dirty = False

    @property
    def migrate_data(self) -> Migrate:
        if self._migrate_data is None:
            self.__load_data()
        if self._migrate_data is None:
            raise ValueError()
        return self._migrate_data

    def __load_data(self) -> None:
        migrate_data = get_migrate_template()
        if configuration.DATA_MIGRATE_PATH.is_file():
            loaded = load(configuration.DATA_MIGRATE_PATH.read_text(), Loader=Loader)
            # Files written before the history was kept only hold a version
            if isinstance(loaded, dict):
                migrate_data["version"] = int(loaded.get("version") or 0)
                migrate_data["applied"] = list(loaded.get("applied") or [])
        self._migrate_data = migrate_data

    def __save_data(self, migrate_data: Migrate) -> None:
        configuration.DATA_MIGRATE_PATH.parent.mkdir(parents=True, exist_ok=True)
        configuration.DATA_MIGRATE_PATH.write_text(
            dump(
                {"version": migrate_data["version"], "applied": list(migrate_data["applied"])},
                Dumper=Dumper,
                sort_keys=False,
            )
        )

    def flush(self) -> None:
        if self._migrate_data is not None and self.is_dirty:
            self.__save_data(self._migrate_data)
            self.is_dirty = False

    def reset(self) -> None:
        self._migrate_data = None
        self.is_dirty = False

    def get_version(self) -> int:
        return self.migrate_data["version"]

    def get_applied(self) -> list[AppliedMigration]:
        return deepcopy(self.migrate_data["applied"])

    def record(self, version: int, name: str) -> None:
        current = self.migrate_data["version"]
        if version <= current:
            raise ValueError(
                f"migration {version} ({name}) is not newer than the applied version {current}"
            )
        self.is_dirty = True
        self.migrate_data["version"] = version
        self.migrate_data["applied"].append(
            {
                "version": version,
                "name": name,
                "applied_at": time.datetime_to_iso_str(time.now_utc()),
            }
        )


MIGRATE_REPO = MigrateRepository()
