# SPDX-License-Identifier: MIT

"""
Whether the next todo or comment listing renumbers the synthetic ids shown in
the terminal. Starts from the clear_ids_on_view setting and can be overridden
per invocation with --clear-ids/--no-clear-ids.
"""

from contextvars import ContextVar

_renumber_listing_ids: ContextVar[bool] = ContextVar("renumber_listing_ids", default=True)


def set_clear_ids(value: bool) -> None:
    _renumber_listing_ids.set(value)


def get_clear_ids() -> bool:
    """True if listing todos or workspaces starts the synthetic ids over at 1."""
    return _renumber_listing_ids.get()
