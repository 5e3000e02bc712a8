# SPDX-License-Identifier: MIT

from typing import TypedDict


class AppliedMigration(TypedDict):
    version: int
    name: str
    applied_at: str


class Migrate(TypedDict):
    """Contents of migrate.yaml. version is the highest applied migration."""

    version: int
    applied: list[AppliedMigration]
