# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab


import os
from collections.abc import Sequence
from pathlib import Path

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
    QalterServerError,
    QalterUnknownJobError,
)
from qalter_lib.core.logger import get_logger
from qalter_lib.properties.attributes import AttributeEdit

from .system import VirtualServer, VirtualServerError, VirtualServerSystem

logger = get_logger(__name__)


class VirtualConnection(Connection):
    """
    Connection to a server of the Virtual Server System.
    """

    def __init__(self, server: VirtualServer):
        super().__init__(server.name)
        self._server = server
        self._attribute_errors: list[AttributeRejection] = []

    def alterJob(self, job_id: str, edits: Sequence[AttributeEdit]) -> None:
        self._attribute_errors = []
        try:
            self._server.alterJob(job_id, edits)
        except VirtualServerError as e:
            if e.code == CFG.error_codes.unknown_job_id:
                raise QalterUnknownJobError(e.code, str(e), job_id) from e

            self._attribute_errors = [
                AttributeRejection(edit, code, message)
                for edit, code, message in e.rejected
            ]
            raise QalterServerError(e.code, str(e), job_id) from e

    def getAttributeErrors(self) -> list[AttributeRejection]:
        if self.closed:
            raise QalterError(f"Connection to server '{self.server}' is closed.")
        return list(self._attribute_errors)

    def _disconnect(self) -> None:
        self._attribute_errors = []


@channel
class VirtualChannel(ChannelInterface, metaclass=ChannelMeta):
    """
    Implementation of ChannelInterface for the Virtual Server System.

    The servers are loaded lazily from the YAML file named by the
    `QALTER_VIRTUAL_STATE` environment variable, or can be set directly
    using `VirtualChannel.setSystem`.
    """

    _system: VirtualServerSystem | None = None
    _security_initialized: bool = False

    def envName() -> str:
        return "VIRTUAL"

    def isAvailable() -> bool:
        return (
            VirtualChannel._system is not None
            or os.environ.get(CFG.env_vars.virtual_state) is not None
        )

    def setSystem(system: VirtualServerSystem | None) -> None:
        """Use the provided virtual servers (None to reload from the state file)."""
        VirtualChannel._system = system

    def getSystem() -> VirtualServerSystem:
        """
        Return the virtual servers, loading them from the state file if needed.

        Raises:
            QalterError: If no virtual servers are set and the state file cannot be loaded.
        """
        if VirtualChannel._system is None:
            if not (state := os.environ.get(CFG.env_vars.virtual_state)):
                raise QalterError(
                    f"No virtual servers defined. Set '{CFG.env_vars.virtual_state}'."
                )
            try:
                VirtualChannel._system = VirtualServerSystem.fromFile(Path(state))
            except VirtualServerError as e:
                raise QalterError(str(e)) from e
            logger.debug(f"Loaded virtual servers from '{state}'.")

        return VirtualChannel._system

    def defaultServer() -> str | None:
        return VirtualChannel.getSystem().default_server

    def connect(server: str) -> VirtualConnection:
        try:
            connection = VirtualConnection(VirtualChannel.getSystem().getServer(server))
        except VirtualServerError as e:
            raise QalterConnectionError(server, e.code) from e

        logger.debug(f"Connected to virtual server '{server}'.")
        return connection

    def locateJob(job_id: str, server: str) -> str | None:
        located = VirtualChannel.getSystem().locateJob(job_id, server)
        logger.debug(f"Job '{job_id}' located at '{located}'.")
        return located

    def initSecurity() -> None:
        VirtualChannel._security_initialized = True

    def closeSecurity() -> None:
        VirtualChannel._security_initialized = False
