# SPDX-License-Identifier: MIT

from typing import Optional, TypedDict


class Session(TypedDict):
    user_id: str
    name: Optional[str]
    email: Optional[str]
    token: str
