# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
General utility functions for qalter.

This module provides the usage text of the command, helpers for writing
unformatted diagnostics to standard error, YAML loading, and conversion of
recorded failure codes to process exit statuses.
"""

from functools import lru_cache

import yaml
from rich.console import Console

from .config import CFG
from .logger import get_logger

logger = get_logger(__name__)

# plain stderr console for diagnostics that must keep their exact layout
err_console = Console(stderr=True, markup=False, highlight=False, soft_wrap=True)

USAGE = (
    f"usage: {CFG.binary_name} [-a date_time] [-A account_string] [-c interval] [-e path]\n"
    "\t[-h hold_list] [-j y|n] [-k keep] [-J X-Y[:Z]] [-l resource_list]\n"
    "\t[-m mail_options] [-M user_list] [-N jobname] [-o path] [-p priority]\n"
    "\t[-r y|n] [-S path] [-u user_list] [-W dependency_list] [-P project_name] job_identifier...\n"
    f"       {CFG.binary_name} --version"
)


def print_usage() -> None:
    """Print the usage text of qalter to standard error."""
    err_console.print(USAGE.expandtabs(8))


def print_parse_error(text: str, position: int) -> None:
    """
    Print the parsed string with a caret pointing at the position of the error.

    Args:
        text (str): The string that failed to parse.
        position (int): Offset of the offending character in `text`.
    """
    err_console.print(text)
    err_console.print(" " * max(position, 0) + "^")


@lru_cache(maxsize=1)
def load_yaml_loader() -> type[yaml.SafeLoader]:
    """Return the fastest available safe YAML loader (CSafeLoader if possible)."""
    try:
        from yaml import (
            CSafeLoader as SafeLoader,  # ty: ignore[possibly-missing-import]
        )

        logger.debug("Loaded YAML CLoader.")
    except ImportError:
        from yaml import SafeLoader

        logger.debug("Loaded default YAML loader.")

    return SafeLoader


def to_exit_status(outcome: int) -> int:
    """
    Convert a recorded failure code into a process exit status.

    Server error codes exceed the range of exit statuses and are truncated
    by the operating system. Codes that would be truncated to zero
    are replaced by the default exit code so that a failure is never reported
    as a success.

    Args:
        outcome (int): The aggregated outcome of the run.

    Returns:
        int: Exit status to pass to `sys.exit`.
    """
    if outcome and not outcome & 0xFF:
        logger.debug(
            f"Outcome {outcome} cannot be used as an exit status. Using {CFG.exit_codes.default}."
        )
        return CFG.exit_codes.default

    return outcome
