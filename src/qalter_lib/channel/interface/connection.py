# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab


from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Self

from qalter_lib.core.logger import get_logger
from qalter_lib.properties.attributes import AttributeEdit

logger = get_logger(__name__)


@dataclass(frozen=True)
class AttributeRejection:
    """
    Refusal of a single attribute edit reported by the batch server.

    Attributes:
        edit (AttributeEdit): The rejected edit as reported back by the server.
        code (int): Server error code.
        message (str): Server error message.
    """

    edit: AttributeEdit
    code: int
    message: str


class Connection(ABC):
    """
    Abstract base class for an open connection to a batch server.

    A connection is used as a context manager; it is closed when the `with` block
    is left, no matter how. Closing is idempotent: a connection that has already
    been closed explicitly is not closed again.
    """

    def __init__(self, server: str):
        self.server = server
        self._closed = False

    @property
    def closed(self) -> bool:
        """Whether the connection has already been closed."""
        return self._closed

    @abstractmethod
    def alterJob(self, job_id: str, edits: Sequence[AttributeEdit]) -> None:
        """
        Request alteration of the attributes of a job.

        Args:
            job_id (str): Fully qualified job identifier.
            edits (Sequence[AttributeEdit]): Edits to apply, in order.

        Raises:
            QalterUnknownJobError: If the server does not know the job.
            QalterServerError: If the server refuses the request for any other reason.
        """

    @abstractmethod
    def getAttributeErrors(self) -> list[AttributeRejection]:
        """
        Return the attribute errors reported for the last failed request.

        Only valid while the connection is open.

        Returns:
            list[AttributeRejection]: Rejected edits in the order reported by the server.
        """

    @abstractmethod
    def _disconnect(self) -> None:
        """Release the underlying connection."""

    def close(self) -> None:
        """Close the connection if it is still open."""
        if self._closed:
            return

        logger.debug(f"Closing connection to server '{self.server}'.")
        self._disconnect()
        self._closed = True

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *_exc_info) -> None:
        self.close()
