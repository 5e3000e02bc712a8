# SPDX-License-Identifier: MIT

from typing import TypedDict


class SyncReport(TypedDict):
    patched: int
    uploaded: int
    failed: int
    retained: int
    duplicates_removed: int
    total: int
