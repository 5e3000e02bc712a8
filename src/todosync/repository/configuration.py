# SPDX-License-Identifier: MIT

from copy import deepcopy
from typing import Optional

from yaml import dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CLoader as Loader  # noqa: F401
except ImportError:
    from yaml import Dumper, Loader  # type: ignore[assignment]

from todosync import configuration


class ConfigurationRepository:
    def __init__(self) -> None:
        self._config: Optional[configuration.Configuration] = None
        self.is_dirty = False

    @property
    def config(self) -> configuration.Configuration:
        if self._config is None:
            self.__load_data()
        if self._config is None:
            raise ValueError()
        return self._config

    def __load_data(self) -> None:
        loaded = None
        if configuration.APP_CONFIG_PATH.is_file():
            loaded = load(configuration.APP_CONFIG_PATH.read_text(), Loader=Loader)

        # Fill in keys added after the config file was written
        config = configuration.get_default_configuration()
        if isinstance(loaded, dict):
            config.update(loaded)  # type: ignore[typeddict-item]
        self._config = config

    def __save_data(self, config: configuration.Configuration) -> None:
        configuration.APP_CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        configuration.APP_CONFIG_PATH.write_text(dump(dict(config), Dumper=Dumper))

    def flush(self) -> None:
        if self._config is not None and self.is_dirty:
            self.__save_data(self._config)
            self.is_dirty = False

    def reset(self) -> None:
        self._config = None
        self.is_dirty = False

    def get_config(self) -> configuration.Configuration:
        return deepcopy(self.config)

    def get_api_base_url(self) -> str:
        return configuration.api_base_url_override() or self.config["api_base_url"]

    def update_config(
        self,
        api_base_url: Optional[str] = None,
        sync_interval_seconds: Optional[int] = None,
        request_timeout_seconds: Optional[float] = None,
        data_path: Optional[str] = None,
        remove_data_path: bool = False,
        clear_ids_on_view: Optional[bool] = None,
        log_level: Optional[str] = None,
    ) -> None:
        self.is_dirty = True

        if api_base_url is not None:
            self.config["api_base_url"] = api_base_url.rstrip("/")
        if sync_interval_seconds is not None:
            self.config["sync_interval_seconds"] = sync_interval_seconds
        if request_timeout_seconds is not None:
            self.config["request_timeout_seconds"] = request_timeout_seconds
        if data_path is not None:
            self.config["data_path"] = data_path
        if remove_data_path:
            self.config["data_path"] = None
        if clear_ids_on_view is not None:
            self.config["clear_ids_on_view"] = clear_ids_on_view
        if log_level is not None:
            self.config["log_level"] = log_level.upper()


CONFIGURATION_REPO = ConfigurationRepository()
