# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Channels to batch servers.

Importing this package registers all available channels in `ChannelMeta`,
in the order in which they are tried by `ChannelMeta.guess`.
"""

from .interface import AttributeRejection, ChannelInterface, ChannelMeta, Connection
from .pbs import PBSChannel
from .virtual import VirtualChannel

__all__ = [
    "AttributeRejection",
    "ChannelInterface",
    "ChannelMeta",
    "Connection",
    "PBSChannel",
    "VirtualChannel",
]
