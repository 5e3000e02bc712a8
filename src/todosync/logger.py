# SPDX-License-Identifier: MIT

import logging

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "todosync"


def configure_logging(level: str = "WARNING") -> None:
    """
    Route the todosync logger hierarchy through a single RichHandler on stderr.

    Calling this again only updates the level.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level.upper())
    logger.propagate = False

    if any(isinstance(handler, RichHandler) for handler in logger.handlers):
        return

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logger.addHandler(handler)
