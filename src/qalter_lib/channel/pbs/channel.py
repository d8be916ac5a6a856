# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab


from collections.abc import Sequence

from qalter_lib.channel.interface import (
    AttributeRejection,
    ChannelInterface,
    ChannelMeta,
    Connection,
    channel,
)
from qalter_lib.core.config import CFG
from qalter_lib.core.error import (
    QalterConnectionError,
    QalterError,
    QalterSecurityError,
    QalterServerError,
    QalterUnknownJobError,
)
from qalter_lib.core.logger import get_logger
from qalter_lib.properties.attributes import AttributeEdit

from .common import getDefaultServer
from .library import PBSLibrary

logger = get_logger(__name__)


class PBSConnection(Connection):
    """
    Connection to a PBS server opened through the PBS client library.
    """

    def __init__(self, lib: PBSLibrary, server: str, handle: int):
        super().__init__(server)
        self._lib = lib
        self._handle = handle

    def alterJob(self, job_id: str, edits: Sequence[AttributeEdit]) -> None:
        logger.debug(
            f"Altering job '{job_id}' at '{self.server}': "
            f"{', '.join(edit.toStr() for edit in edits)}."
        )
        if self._lib.alterJob(self._handle, job_id, edits) == 0:
            return

        code = self._lib.errno or CFG.error_codes.system
        message = self._lib.getErrorMessage(self._handle) or (
            f"Server returned error {code} for job"
        )

        if code == CFG.error_codes.unknown_job_id:
            raise QalterUnknownJobError(code, message, job_id)
        raise QalterServerError(code, message, job_id)

    def getAttributeErrors(self) -> list[AttributeRejection]:
        if self.closed:
            raise QalterError(f"Connection to server '{self.server}' is closed.")

        return [
            AttributeRejection(edit, code, message)
            for edit, code, message in self._lib.getAttributesInError(self._handle)
        ]

    def locateJob(self, job_id: str) -> str | None:
        """Ask the connected server which server manages the job."""
        return self._lib.locateJob(self._handle, job_id)

    def _disconnect(self) -> None:
        self._lib.disconnect(self._handle)


@channel
class PBSChannel(ChannelInterface, metaclass=ChannelMeta):
    """
    Implementation of ChannelInterface for PBS Pro.
    """

    _security_open: bool = False

    def envName() -> str:
        return "PBS"

    def isAvailable() -> bool:
        try:
            PBSLibrary.load()
        except QalterError:
            return False
        return True

    def defaultServer() -> str | None:
        return getDefaultServer()

    def connect(server: str) -> PBSConnection:
        lib = PBSLibrary.load()
        handle = lib.connect(server)
        if handle <= 0:
            raise QalterConnectionError(server, lib.errno)

        logger.debug(f"Connected to PBS server '{server}' (handle {handle}).")
        return PBSConnection(lib, server, handle)

    def locateJob(job_id: str, server: str) -> str | None:
        try:
            connection = PBSChannel.connect(server)
        except QalterConnectionError as e:
            logger.debug(f"Could not locate job '{job_id}': {e}.")
            return None

        with connection:
            located = connection.locateJob(job_id)

        logger.debug(f"Job '{job_id}' located at '{located}'.")
        return located

    def initSecurity() -> None:
        if not PBSLibrary.load().initSecurity():
            raise QalterSecurityError("unable to initialize security library.")
        PBSChannel._security_open = True

    def closeSecurity() -> None:
        if not PBSChannel._security_open:
            return
        PBSLibrary.load().closeSecurity()
        PBSChannel._security_open = False
