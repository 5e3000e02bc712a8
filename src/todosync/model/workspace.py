# SPDX-License-Identifier: MIT

from typing import Optional, TypedDict

import pendulum

PERSONAL_WORKSPACE_NAME = "Personal"


class Workspace(TypedDict):
    id: str
    name: str
    owner_id: Optional[str]
    created_at: pendulum.DateTime
    updated_at: pendulum.DateTime
