# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab


import os
from pathlib import Path

from qalter_lib.core.config import CFG
from qalter_lib.core.logger import get_logger

logger = get_logger(__name__)


def parsePBSConfToDictionary(text: str) -> dict[str, str]:
    """
    Parse the content of a `pbs.conf` file into a dictionary.

    Lines have the form `KEY=VALUE`. Empty lines and comments are ignored.

    Returns:
        dict[str, str]: Dictionary mapping keys to values.
    """
    result: dict[str, str] = {}

    for raw_line in text.splitlines():
        line = raw_line.strip()

        if not line or line.startswith("#") or "=" not in line:
            continue

        key, value = line.split("=", 1)
        result[key.strip()] = value.strip()

    return result


def getDefaultServer() -> str | None:
    """
    Determine the default PBS server.

    The server is taken from the `PBS_DEFAULT` or `PBS_SERVER` environment variables
    or from `PBS_SERVER` in the `pbs.conf` file, in this order.

    Returns:
        str | None: Name of the default server or None if it is not configured.
    """
    for var in (CFG.env_vars.pbs_default, CFG.env_vars.pbs_server):
        if server := os.environ.get(var):
            logger.debug(f"Default server from '{var}': {server}.")
            return server

    conf = Path(os.environ.get(CFG.env_vars.pbs_conf_file) or CFG.pbs_options.conf_file)
    try:
        server = parsePBSConfToDictionary(conf.read_text()).get("PBS_SERVER")
    except OSError as e:
        logger.debug(f"Could not read PBS configuration file '{conf}': {e}.")
        return None

    logger.debug(f"Default server from '{conf}': {server}.")
    return server or None
