# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from collections.abc import Sequence

from qalter_lib.channel.interface import ChannelInterface
from qalter_lib.core.error import (
    QalterError,
    QalterServerError,
    QalterUnknownJobError,
)
from qalter_lib.core.logger import get_logger
from qalter_lib.core.repeater import Repeater
from qalter_lib.properties.attributes import AttributeEdit
from qalter_lib.properties.job_id import JobIdentifier

from .classifier import ErrorClassifier

logger = get_logger(__name__)


class Dispatcher:
    """
    Sends the alteration request to the server of each job.

    Jobs are processed one after another. A job the server does not know
    is located once and the request is repeated at the server that manages it.
    A failure of one job does not prevent the remaining jobs from being processed.

    Attributes:
        outcome (int): Exit code of the last failed job, zero if no job failed.
        relocations (dict[str, str]): Jobs that were found at another server,
            mapped to that server.
    """

    # the original server and the server the job was located at
    MAX_ATTEMPTS = 2

    def __init__(
        self,
        channel: type[ChannelInterface],
        edits: Sequence[AttributeEdit],
        classifier: ErrorClassifier,
    ):
        self._channel = channel
        self._edits = tuple(edits)
        self._classifier = classifier
        self._default_server: str | None = None
        self.outcome = 0
        self.relocations: dict[str, str] = {}

    def run(self, job_ids: Sequence[str]) -> int:
        """
        Alter all the specified jobs.

        Args:
            job_ids (Sequence[str]): Job identifiers as supplied on the command line.

        Returns:
            int: Exit code of the last failed job, or zero if all jobs were altered.
        """
        self._default_server = self._channel.defaultServer()
        logger.debug(f"Default server: {self._default_server}.")

        repeater = Repeater(list(job_ids), self.alterJob)
        repeater.onException(QalterError, self._recordFailure)
        repeater.run()

        return self.outcome

    def alterJob(self, raw_id: str) -> None:
        """
        Send the alteration request for a single job.

        Args:
            raw_id (str): The job identifier as supplied on the command line.

        Raises:
            QalterIdentifierError: If the job identifier is malformed.
            QalterConnectionError: If the server cannot be reached.
            QalterServerError: If the server refuses the request.
        """
        job = JobIdentifier.fromStr(raw_id, self._default_server)
        server = job.server

        for attempt in range(1, self.MAX_ATTEMPTS + 1):
            with self._channel.connect(server) as connection:
                try:
                    connection.alterJob(job.job_id, self._edits)
                    logger.debug(f"Altered job '{job.job_id}' at '{server}'.")
                    return
                except QalterUnknownJobError:
                    if attempt == self.MAX_ATTEMPTS:
                        raise
                    if not (located := self._channel.locateJob(job.job_id, server)):
                        raise
                except QalterServerError:
                    if errors := connection.getAttributeErrors():
                        self._classifier.classify(connection, job.job_id, errors)
                    raise

            logger.debug(f"Job '{job.job_id}' moved from '{server}' to '{located}'.")
            self.relocations[job.job_id] = located
            server = located

    def _recordFailure(self, exception: BaseException, _metadata: Repeater) -> None:
        """Report the failure of a job and record it as the outcome."""
        logger.error(exception)
        self.outcome = getattr(exception, "exit_code", self.outcome) or self.outcome
