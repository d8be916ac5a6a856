# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Value types and parsers used by qalter.

This package contains job attribute names and attribute edits, job identifier
parsing, and the parsers for dates, resource lists, and keyword lists
supplied on the command line.
"""
