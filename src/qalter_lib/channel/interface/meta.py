# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab


import os
from abc import ABCMeta

from qalter_lib.core.config import CFG
from qalter_lib.core.error import QalterError
from qalter_lib.core.logger import get_logger

from .interface import ChannelInterface

logger = get_logger(__name__)


class ChannelMeta(ABCMeta):
    """
    Metaclass of channel implementations keeping the registry of known channels.

    Channels are tried in the order of their registration.
    """

    _registry: dict[str, type[ChannelInterface]] = {}

    def __str__(cls: type[ChannelInterface]):
        return cls.envName()

    @classmethod
    def register(mcs, channel_cls: type[ChannelInterface]) -> None:
        """Make `channel_cls` available under its `envName`."""
        mcs._registry[channel_cls.envName()] = channel_cls

    @classmethod
    def fromStr(mcs, name: str) -> type[ChannelInterface]:
        """
        Return the channel registered as `name`.

        Raises:
            QalterError: If no such channel is registered.
        """
        if (channel_cls := mcs._registry.get(name)) is None:
            raise QalterError(f"No channel registered as '{name}'.")
        return channel_cls

    @classmethod
    def guess(mcs) -> type[ChannelInterface]:
        """
        Return the first registered channel usable on this host.

        Raises:
            QalterError: If none of the registered channels is available.
        """
        available = (cls for cls in mcs._registry.values() if cls.isAvailable())
        if (channel_cls := next(available, None)) is None:
            raise QalterError("Could not guess a channel. No registered channel available.")

        logger.debug(f"Guessed channel: {str(channel_cls)}.")
        return channel_cls

    @classmethod
    def obtain(mcs, name: str | None = None) -> type[ChannelInterface]:
        """
        Select the channel to use.

        An explicit `name` wins over the channel environment variable,
        which wins over probing the registered channels.

        Args:
            name (str | None): Name of the channel to use, if any.

        Raises:
            QalterError: If the requested channel is not registered
                or no channel can be guessed.
        """
        name = name or os.environ.get(CFG.env_vars.channel)
        if name:
            logger.debug(f"Using channel '{name}'.")
            return mcs.fromStr(name)

        return mcs.guess()


def channel(cls: type[ChannelInterface]) -> type[ChannelInterface]:
    """Class decorator registering a channel implementation in `ChannelMeta`."""
    ChannelMeta.register(cls)
    return cls
