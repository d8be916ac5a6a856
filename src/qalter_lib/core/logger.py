# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

from .config import CFG


def get_logger(name: str, show_time: bool = False) -> logging.Logger:
    """
    Return the logger `name` writing to standard error through rich.

    Setting the debug environment variable enables debug messages and timestamps.
    Messages are printed without markup interpretation since they often contain
    job identifiers with array subscripts (`12[3].server`).

    Args:
        name (str): Name of the logger, usually `__name__`.
        show_time (bool): Show timestamps even outside of debug mode.
    """
    level = logging.DEBUG if _debug_mode() else logging.INFO

    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False

    if not logger.handlers:
        logger.addHandler(_make_handler(level, show_time or level == logging.DEBUG))

    return logger


def _debug_mode() -> bool:
    return os.environ.get(CFG.env_vars.debug_mode) is not None


def _make_handler(level: int, show_time: bool) -> RichHandler:
    return RichHandler(
        console=Console(stderr=True),
        level=level,
        markup=False,
        rich_tracebacks=True,
        show_path=False,
        show_time=show_time,
        log_time_format=CFG.date_formats.standard,
        tracebacks_width=None,
        tracebacks_code_width=None,
    )
