# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import sys
from collections.abc import Mapping, Sequence
from typing import NoReturn

from qalter_lib.channel.interface import (
    AttributeRejection,
    ChannelInterface,
    Connection,
)
from qalter_lib.core.common import print_usage, to_exit_status
from qalter_lib.core.config import CFG
from qalter_lib.core.logger import get_logger
from qalter_lib.properties.attributes import Attribute

logger = get_logger(__name__)


class ErrorClassifier:
    """
    Reports attributes rejected by the server in terms of qalter options.

    A rejected attribute that was set by one of the options terminates qalter:
    the option value is invalid for every job, so no further job is attempted.
    Rejections of attributes not known to qalter are left to the generic
    per-job error reporting.
    """

    def __init__(self, lookup: Mapping[str, str], channel: type[ChannelInterface]):
        """
        Args:
            lookup (Mapping[str, str]): Mapping of attribute names to option letters.
            channel (type[ChannelInterface]): Channel owning the security context
                that has to be released before exiting.
        """
        self._lookup = lookup
        self._channel = channel

    def classify(
        self,
        connection: Connection,
        job_id: str,
        errors: Sequence[AttributeRejection],
    ) -> None:
        """
        Inspect the attribute errors reported for a job.

        Returns only if the first unprocessed error concerns an attribute
        that does not correspond to any option. Otherwise qalter exits.

        Args:
            connection (Connection): The still open connection the errors were read from.
            job_id (str): Identifier of the job the request was sent for.
            errors (Sequence[AttributeRejection]): Errors reported by the server, in order.
        """
        for error in errors:
            if (option := self._lookup.get(error.edit.name)) is None:
                logger.debug(
                    f"Attribute '{error.edit.name}' does not correspond to any option."
                )
                return

            if error.edit.name == Attribute.RESOURCE_LIST:
                self._release(connection)
                logger.error(f"{error.message} {job_id}")
                sys.exit(to_exit_status(error.code) or CFG.exit_codes.default)

            self._reject(connection, option, error)

    def _reject(
        self, connection: Connection, option: str, error: AttributeRejection
    ) -> NoReturn:
        """Report the rejected option and exit."""
        self._release(connection)

        if error.code == CFG.error_codes.job_too_large:
            logger.error(f"Job {error.message}")
        else:
            logger.error(f"illegal -{option} value")
            print_usage()

        sys.exit(CFG.exit_codes.usage)

    def _release(self, connection: Connection) -> None:
        """Close the connection and the security context before exiting."""
        connection.close()
        self._channel.closeSecurity()
