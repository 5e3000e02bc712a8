# SPDX-License-Identifier: MIT

import os
from pathlib import Path
from typing import Optional, TypedDict

from yaml import load

try:
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Loader  # type: ignore[assignment]
import platformdirs

APP_NAME = "todosync"

API_BASE_URL_ENV = "TODOSYNC_API_BASE_URL"

CONFIG_PATH = platformdirs.user_config_path(APP_NAME)
APP_CONFIG_PATH = CONFIG_PATH / "config.yaml"

# These will be set dynamically by load_data_path_configuration()
DATA_PATH: Path = platformdirs.user_data_path(APP_NAME)
DATA_STATE_DIR: Path = DATA_PATH / "state"
DATA_MIGRATE_PATH: Path = DATA_PATH / "migrate.yaml"
DATA_SESSION_PATH: Path = DATA_PATH / "session.yaml"
DATA_ID_MAP_PATH: Path = DATA_PATH / "id_map.yaml"


class Configuration(TypedDict):
    api_base_url: str
    sync_interval_seconds: int
    request_timeout_seconds: float
    data_path: Optional[str]
    clear_ids_on_view: bool
    log_level: str


def get_default_configuration() -> Configuration:
    return {
        "api_base_url": "http://localhost:3000",
        "sync_interval_seconds": 60,
        "request_timeout_seconds": 10.0,
        "data_path": None,
        "clear_ids_on_view": True,
        "log_level": "WARNING",
    }


def set_data_path(data_path: Path) -> None:
    """
    Point every data file at a new data directory.

    Used by load_data_path_configuration() and by tests that need an
    isolated data directory.
    """
    global DATA_PATH, DATA_STATE_DIR, DATA_MIGRATE_PATH, DATA_SESSION_PATH, DATA_ID_MAP_PATH

    DATA_PATH = data_path
    DATA_STATE_DIR = DATA_PATH / "state"
    DATA_MIGRATE_PATH = DATA_PATH / "migrate.yaml"
    DATA_SESSION_PATH = DATA_PATH / "session.yaml"
    DATA_ID_MAP_PATH = DATA_PATH / "id_map.yaml"


def load_data_path_configuration() -> None:
    """
    Load the configuration and set the DATA_PATH variables dynamically.

    This must be called after the config file exists and before any
    repositories are instantiated.
    """
    if not APP_CONFIG_PATH.is_file():
        # Config doesn't exist yet, use defaults
        return

    config: Optional[Configuration] = load(APP_CONFIG_PATH.read_text(), Loader=Loader)
    if config is None:
        return

    data_path_setting = config.get("data_path")
    if data_path_setting is not None:
        set_data_path(Path(data_path_setting))


def api_base_url_override() -> Optional[str]:
    value = os.environ.get(API_BASE_URL_ENV)
    if value is None or value.strip() == "":
        return None
    return value.strip()
