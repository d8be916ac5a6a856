# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Core infrastructure for qalter.

This module collects the foundational classes and helpers used across the
qalter codebase: configuration, error types, structured logging, the
per-item repeater, and click formatting.
"""
