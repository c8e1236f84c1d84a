from __future__ import annotations

import logging
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

from .config import DEFAULT_LOG_LEVEL

LOGGER_NAME = "process_scheduler"


def configure_logging(level: Union[int, str] = DEFAULT_LOG_LEVEL, console: Optional[Console] = None) -> logging.Logger:
    """
    Route the package's loggers through a rich handler on stderr.

    Calling it again swaps the handler instead of stacking a second one.
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level}")
        level = resolved

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
