# SPDX-License-Identifier: MIT

import logging
from typing import Optional

from yaml import YAMLError, dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CLoader as Loader  # noqa: F401
except ImportError:
    from yaml import Dumper, Loader  # type: ignore[assignment]

from todosync import configuration
from todosync.model.session import Session

logger = logging.getLogger(__name__)


class SessionRepository:
    def get_session(self) -> Optional[Session]:
        if not configuration.DATA_SESSION_PATH.is_file():
            return None
        try:
            raw_session = load(configuration.DATA_SESSION_PATH.read_text(), Loader=Loader)
        except YAMLError as e:
            logger.warning("ignoring unreadable session file: %s", e)
            return None
        if not isinstance(raw_session, dict) or not raw_session.get("token"):
            return None
        return {
            "user_id": str(raw_session["user_id"]),
            "name": raw_session.get("name"),
            "email": raw_session.get("email"),
            "token": str(raw_session["token"]),
        }

    def save_session(self, session: Session) -> None:
        configuration.DATA_SESSION_PATH.parent.mkdir(parents=True, exist_ok=True)
        configuration.DATA_SESSION_PATH.write_text(dump(dict(session), Dumper=Dumper))

    def delete_session(self) -> None:
        if configuration.DATA_SESSION_PATH.exists():
            configuration.DATA_SESSION_PATH.unlink()


SESSION_REPO = SessionRepository()
