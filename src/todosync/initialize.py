# SPDX-License-Identifier: MIT

from yaml import dump

try:
    from yaml import CDumper as Dumper
    from yaml import CLoader as Loader  # noqa: F401
except ImportError:
    from yaml import Dumper  # type: ignore[assignment]

from todosync import configuration
from todosync import state as app_state
from todosync.logger import configure_logging
from todosync.migrate import migrate
from todosync.model.id_map import IdMap
from todosync.model.migrate import Migrate
from todosync.repository.configuration import CONFIGURATION_REPO
from todosync.template.id_map import get_id_map_template
from todosync.template.migrate import get_migrate_template


def initialize() -> None:
    configuration.CONFIG_PATH.mkdir(parents=True, exist_ok=True)
    configuration.load_data_path_configuration()
    configuration.DATA_PATH.mkdir(parents=True, exist_ok=True)

    __ensure_config_files()
    __ensure_data_files()

    config = CONFIGURATION_REPO.get_config()
    configure_logging(config["log_level"])
    app_state.set_clear_ids(config["clear_ids_on_view"])

    __ensure_migrations()


def __ensure_config_files() -> None:
    if not configuration.APP_CONFIG_PATH.is_file():
        config = configuration.get_default_configuration()
        configuration.APP_CONFIG_PATH.write_text(dump(dict(config), Dumper=Dumper))


def __ensure_data_files() -> None:
    configuration.DATA_STATE_DIR.mkdir(parents=True, exist_ok=True)
    if not configuration.DATA_MIGRATE_PATH.is_file():
        migrate_data: Migrate = get_migrate_template()
        configuration.DATA_MIGRATE_PATH.write_text(
            dump(dict(migrate_data), Dumper=Dumper, sort_keys=False)
        )
    if not configuration.DATA_ID_MAP_PATH.is_file():
        id_map: IdMap = get_id_map_template()
        configuration.DATA_ID_MAP_PATH.write_text(dump(dict(id_map), Dumper=Dumper))


def __ensure_migrations() -> None:
    migrate.run_required_migrations()
