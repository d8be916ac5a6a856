# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Alteration of batch jobs.

- `AttributeBuilder` translates qalter options into attribute edits,
  validating the option values that can be checked locally.
- `Dispatcher` sends the edits to the server of each job, locating jobs
  that moved to another server and recording the outcome of the run.
- `ErrorClassifier` maps attributes rejected by the server back to the
  options that set them and terminates qalter for invalid option values.
"""

from .builder import AttributeBuilder
from .classifier import ErrorClassifier
from .dispatcher import Dispatcher

__all__ = [
    "AttributeBuilder",
    "Dispatcher",
    "ErrorClassifier",
]
