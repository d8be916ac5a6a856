# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Abstractions for talking to batch servers.

- `ChannelInterface`: the abstract interface every server backend implements.
  It opens connections, locates jobs, and manages the security context.

- `Connection` and `AttributeRejection`: an open connection to one server and
  the per-attribute errors it reports after a refused alteration.

- `ChannelMeta`: a metaclass that registers available backends and selects one
  by name, from an environment variable, or by probing availability.
  The `@channel` decorator registers implementations.
"""

from .connection import AttributeRejection, Connection
from .interface import ChannelInterface
from .meta import ChannelMeta, channel

__all__ = [
    "AttributeRejection",
    "ChannelInterface",
    "ChannelMeta",
    "Connection",
    "channel",
]
