# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Core implementation of the qalter command-line tool.

qalter changes attributes of batch jobs that have already been submitted.
Options are translated into attribute edits, the edits are sent to the server
managing each job (locating jobs that moved to another server), and attribute
errors reported by the server are mapped back to the options that caused them.
"""

from .qalter import __version__, cli

__all__ = [
    "__version__",
    "cli",
    "alter",
    "channel",
    "core",
    "properties",
]
