# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Exception types used throughout qalter.

This module defines the qalter-specific exceptions: option validation and
parse errors, malformed job identifiers, connection failures, and errors
reported by the batch server. Each exception carries an exit code which is
recorded as the job's outcome when the exception reaches the command.
"""

from qalter_lib.core.config import CFG

from .logger import get_logger

logger = get_logger(__name__)


class QalterError(Exception):
    """Common exception type for all recoverable qalter errors."""

    exit_code = CFG.exit_codes.default


class QalterParseError(QalterError):
    """
    Raised when an option argument cannot be parsed.

    Attributes:
        code (int): Parser-specific error code. `1` signals a generic illegal value.
        position (int): Offset into the parsed string at which parsing failed.
    """

    exit_code = CFG.exit_codes.usage

    def __init__(self, message: str, code: int, position: int):
        super().__init__(message)
        self.code = code
        self.position = position


class QalterIdentifierError(QalterError):
    """Raised when a job identifier is not properly formed."""

    exit_code = CFG.exit_codes.bad_identifier


class QalterSecurityError(QalterError):
    """Raised when the security library cannot be initialized."""

    exit_code = CFG.exit_codes.security


class QalterConnectionError(QalterError):
    """
    Raised when a connection to a batch server cannot be established.

    The error number reported by the channel is used as the exit code.
    """

    def __init__(self, server: str, errno: int):
        super().__init__(f"cannot connect to server {server} (errno={errno})")
        self.server = server
        self.errno = errno
        self.exit_code = errno or CFG.exit_codes.default


class QalterServerError(QalterError):
    """
    Raised when a batch server refuses a request for a job.

    The server-supplied error code is used as the exit code.
    """

    def __init__(self, code: int, message: str, job_id: str):
        super().__init__(f"{message} {job_id}")
        self.code = code
        self.message = message
        self.job_id = job_id
        self.exit_code = code or CFG.exit_codes.default


class QalterUnknownJobError(QalterServerError):
    """Raised when the batch server does not know the requested job."""

    pass
