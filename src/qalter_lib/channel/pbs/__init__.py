# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Channel to PBS Pro servers through the PBS client library.
"""

from .channel import PBSChannel, PBSConnection
from .library import PBSLibrary

__all__ = [
    "PBSChannel",
    "PBSConnection",
    "PBSLibrary",
]
