# SPDX-License-Identifier: MIT

from typing import Optional

import typer

from todosync.sync.reconciler import MAX_URGENCY, MIN_URGENCY


def validate_urgency(urgency: Optional[float]) -> Optional[float]:
    if urgency is None:
        return None
    if not (MIN_URGENCY <= urgency <= MAX_URGENCY):
        raise typer.BadParameter(
            f"Urgency must be between {MIN_URGENCY:g} and {MAX_URGENCY:g} (inclusive)"
        )
    return urgency


def validate_positive_interval(interval: Optional[int]) -> Optional[int]:
    if interval is None:
        return None
    if interval <= 0:
        raise typer.BadParameter("Interval must be a positive number of seconds")
    return interval


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def validate_log_level(level: Optional[str]) -> Optional[str]:
    if level is None:
        return None
    if level.upper() not in LOG_LEVELS:
        raise typer.BadParameter(f"Log level must be one of {', '.join(LOG_LEVELS)}")
    return level.upper()
