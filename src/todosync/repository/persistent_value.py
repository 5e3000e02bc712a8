# SPDX-License-Identifier: MIT

import logging
from copy import deepcopy
from pathlib import Path
from typing import Any, Callable

from yaml import YAMLError, dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CLoader as Loader  # noqa: F401
except ImportError:
    from yaml import Dumper, Loader  # type: ignore[assignment]

from todosync import configuration

logger = logging.getLogger(__name__)


def _identity(value: Any) -> Any:
    return value


class PersistentValue[T]:
    """
    One named value kept in sync with <data>/state/<key>.yaml.

    mount() adopts the stored value if it loads, otherwise keeps the default,
    and then writes the current value back. Every set() is written through.
    The file holds a single mapping {"value": ...} so that None is a storable
    value distinct from a missing file.
    """

    def __init__(
        self,
        key: str,
        default: T,
        serialize: Callable[[T], Any] = _identity,
        deserialize: Callable[[Any], T] = _identity,
    ) -> None:
        self.key = key
        self._default = default
        self._serialize = serialize
        self._deserialize = deserialize
        self._value: T = deepcopy(default)
        self.is_mounted = False

    @property
    def path(self) -> Path:
        return configuration.DATA_STATE_DIR / f"{self.key}.yaml"

    @property
    def value(self) -> T:
        return self._value

    def mount(self) -> T:
        if self.path.is_file():
            try:
                self._value = self.__load_data()
                logger.debug("loaded %s from %s", self.key, self.path)
            except (YAMLError, ValueError, KeyError, TypeError) as e:
                logger.warning(
                    "failed to parse stored value for key %r, keeping default: %s",
                    self.key,
                    e,
                )
        self.is_mounted = True
        self.__save_data()
        return self._value

    def set(self, value: T) -> None:
        self._value = value
        self.__save_data()

    def clear(self) -> None:
        self._value = deepcopy(self._default)
        if self.path.exists():
            self.path.unlink()
        logger.debug("cleared %s", self.key)

    def __load_data(self) -> T:
        document = load(self.path.read_text(), Loader=Loader)
        if not isinstance(document, dict) or "value" not in document:
            raise ValueError(f"{self.path.name} does not hold a stored value")
        return self._deserialize(document["value"])

    def __save_data(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        document = {"value": self._serialize(self._value)}
        self.path.write_text(dump(document, Dumper=Dumper))
