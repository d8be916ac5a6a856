# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab


from abc import ABC

from qalter_lib.core.logger import get_logger

from .connection import Connection

logger = get_logger(__name__)


class ChannelInterface(ABC):
    """
    Abstract base class for channels to batch servers.

    A channel opens connections to batch servers, locates jobs that moved
    between servers, and manages the security context of the client.
    Concrete channels must implement these methods to allow qalter
    to talk to different batch systems uniformly.

    All functions should raise QalterError when encountering an error.
    """

    @staticmethod
    def envName() -> str:
        """
        Return the name of the channel.

        Returns:
            str: The channel name.
        """
        raise NotImplementedError(
            "envName method is not implemented for this channel implementation"
        )

    @staticmethod
    def isAvailable() -> bool:
        """
        Determine whether the channel can be used on the current host.

        Returns:
            bool: True if the channel is available, False otherwise.
        """
        raise NotImplementedError(
            "isAvailable method is not implemented for this channel implementation"
        )

    @staticmethod
    def defaultServer() -> str | None:
        """
        Return the server used for job identifiers that do not name one.

        Returns:
            str | None: Name of the default server or None if none is configured.
        """
        raise NotImplementedError(
            "defaultServer method is not implemented for this channel implementation"
        )

    @staticmethod
    def connect(server: str) -> Connection:
        """
        Open a connection to a batch server.

        Args:
            server (str): Name of the server, optionally with a port.

        Returns:
            Connection: The open connection.

        Raises:
            QalterConnectionError: If the connection cannot be established.
        """
        raise NotImplementedError(
            "connect method is not implemented for this channel implementation"
        )

    @staticmethod
    def locateJob(job_id: str, server: str) -> str | None:
        """
        Find the server that currently manages a job.

        Args:
            job_id (str): Fully qualified job identifier.
            server (str): Server that was asked about the job previously.

        Returns:
            str | None: Name of the server managing the job or None if it cannot be located.
        """
        raise NotImplementedError(
            "locateJob method is not implemented for this channel implementation"
        )

    @staticmethod
    def initSecurity() -> None:
        """
        Initialize the client security context.

        Raises:
            QalterSecurityError: If the security library cannot be initialized.
        """
        raise NotImplementedError(
            "initSecurity method is not implemented for this channel implementation"
        )

    @staticmethod
    def closeSecurity() -> None:
        """
        Release the client security context. Calling it repeatedly has no effect.
        """
        raise NotImplementedError(
            "closeSecurity method is not implemented for this channel implementation"
        )
