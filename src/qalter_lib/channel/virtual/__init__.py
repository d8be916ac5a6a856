# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Virtual Server System used for testing and dry runs.

`VirtualServerSystem` keeps servers and their jobs in memory, can mark servers
as unreachable, jobs as moved to another server, and attributes as refused.
`VirtualChannel` exposes it through the `ChannelInterface`.
"""

from .channel import VirtualChannel, VirtualConnection
from .system import VirtualJob, VirtualServer, VirtualServerError, VirtualServerSystem

__all__ = [
    "VirtualChannel",
    "VirtualConnection",
    "VirtualJob",
    "VirtualServer",
    "VirtualServerError",
    "VirtualServerSystem",
]
