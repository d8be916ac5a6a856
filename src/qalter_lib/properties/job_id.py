# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Parsing of job identifiers supplied on the command line.

A job identifier has the form `seq[.parent_server][@current_server]` where
`seq` is the numeric part assigned by the server (optionally followed by an
array subscript) and the server names may include a port.
"""

import re
from dataclasses import dataclass
from typing import Self

from qalter_lib.core.error import QalterIdentifierError
from qalter_lib.core.logger import get_logger

logger = get_logger(__name__)

_JOB_ID_PATTERN = re.compile(
    r"""
    ^(?P<seq>\d+(?:\[[0-9,:\-]*\])?)     # sequence number, optional array subscript
    (?:\.(?P<parent>[^@\s.][^@\s]*))?    # server that created the job
    (?:@(?P<current>[^@\s]+))?$          # server the request should be sent to
    """,
    re.VERBOSE,
)


@dataclass(frozen=True)
class JobIdentifier:
    """
    Fully qualified job identifier and the server to contact about it.

    Attributes:
        job_id (str): Identifier in the `seq.parent_server` form expected by the server.
        server (str): Name of the server the alteration request is sent to.
    """

    job_id: str
    server: str

    @classmethod
    def fromStr(cls, raw: str, default_server: str | None) -> Self:
        """
        Parse a job identifier given on the command line.

        Args:
            raw (str): The job identifier as supplied by the user.
            default_server (str | None): Server used when the identifier names none.

        Returns:
            JobIdentifier: The qualified job identifier and the target server.

        Raises:
            QalterIdentifierError: If the identifier is malformed or no server can be determined.
        """
        if not (match := _JOB_ID_PATTERN.match(raw.strip())):
            raise QalterIdentifierError(f"illegally formed job identifier: {raw}")

        seq = match.group("seq")
        parent = match.group("parent")
        current = match.group("current")

        if not (parent or default_server):
            raise QalterIdentifierError(f"illegally formed job identifier: {raw}")

        job_id = f"{seq}.{parent or default_server}"
        server = current or parent or default_server
        logger.debug(f"Job identifier '{raw}' resolved to '{job_id}' at '{server}'.")

        return cls(job_id, server)
