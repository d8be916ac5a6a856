# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Job attributes that can be altered by qalter.

This module defines the names of the batch job attributes, the `AttributeEdit`
dataclass describing a single requested change, the table mapping qalter
options to attributes, and `OptionLookup`, the reverse mapping used to report
attributes rejected by the server in terms of the options that set them.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Self


class Attribute:
    """Names of job attributes as understood by the batch server."""

    EXECUTION_TIME = "Execution_Time"
    ACCOUNT_NAME = "Account_Name"
    PROJECT = "project"
    CHECKPOINT = "Checkpoint"
    ERROR_PATH = "Error_Path"
    HOLD_TYPES = "Hold_Types"
    JOIN_PATH = "Join_Path"
    KEEP_FILES = "Keep_Files"
    ARRAY_INDICES = "array_indices_submitted"
    RESOURCE_LIST = "Resource_List"
    MAIL_POINTS = "Mail_Points"
    MAIL_USERS = "Mail_Users"
    JOB_NAME = "Job_Name"
    OUTPUT_PATH = "Output_Path"
    PRIORITY = "Priority"
    RERUNABLE = "Rerunable"
    SHELL_PATH_LIST = "Shell_Path_List"
    USER_LIST = "User_List"

    # attributes set through `-W keyword=value`
    DEPEND = "depend"
    STAGEIN = "stagein"
    STAGEOUT = "stageout"
    SANDBOX = "sandbox"
    UMASK = "umask"
    RUN_COUNT = "run_count"
    GROUP_LIST = "group_list"


# Attribute set by each option taking a single value.
# `-W` is missing since the attribute name is supplied by the user.
OPTION_ATTRIBUTES: dict[str, str] = {
    "a": Attribute.EXECUTION_TIME,
    "A": Attribute.ACCOUNT_NAME,
    "c": Attribute.CHECKPOINT,
    "e": Attribute.ERROR_PATH,
    "h": Attribute.HOLD_TYPES,
    "j": Attribute.JOIN_PATH,
    "k": Attribute.KEEP_FILES,
    "J": Attribute.ARRAY_INDICES,
    "l": Attribute.RESOURCE_LIST,
    "m": Attribute.MAIL_POINTS,
    "M": Attribute.MAIL_USERS,
    "N": Attribute.JOB_NAME,
    "o": Attribute.OUTPUT_PATH,
    "p": Attribute.PRIORITY,
    "r": Attribute.RERUNABLE,
    "S": Attribute.SHELL_PATH_LIST,
    "u": Attribute.USER_LIST,
    "P": Attribute.PROJECT,
}

# Attributes that can only be altered through `-W`.
EXTENDED_ATTRIBUTES: tuple[str, ...] = (
    Attribute.DEPEND,
    Attribute.STAGEIN,
    Attribute.STAGEOUT,
    Attribute.SANDBOX,
    Attribute.UMASK,
    Attribute.RUN_COUNT,
    Attribute.GROUP_LIST,
)


@dataclass(frozen=True)
class AttributeEdit:
    """
    A requested change of a single job attribute.

    Attributes:
        name (str): Name of the attribute.
        resource (str | None): Name of the resource for edits of the resource list.
        value (str): Requested value.
    """

    name: str
    value: str
    resource: str | None = None

    @property
    def key(self) -> tuple[str, str | None]:
        """Identity of the edited attribute (or of the edited resource)."""
        return (self.name, self.resource)

    def toStr(self) -> str:
        """
        Convert the edit to the `name[.resource]=value` form used in log messages.
        """
        if self.resource:
            return f"{self.name}.{self.resource}={self.value}"
        return f"{self.name}={self.value}"


class OptionLookup(Mapping[str, str]):
    """
    Read-only mapping of attribute names to the qalter options that set them.
    """

    def __init__(self, pairs: Iterable[tuple[str, str]]):
        self._table: dict[str, str] = dict(pairs)

    @classmethod
    def default(cls) -> Self:
        """
        Build the lookup from the option table.

        All attributes altered through `-W` map to the option `W`.

        Returns:
            OptionLookup: The reverse of `OPTION_ATTRIBUTES` extended by `-W` attributes.
        """
        pairs = [(attr, option) for option, attr in OPTION_ATTRIBUTES.items()]
        pairs.extend((attr, "W") for attr in EXTENDED_ATTRIBUTES)
        return cls(pairs)

    def __getitem__(self, attribute: str) -> str:
        return self._table[attribute]

    def __iter__(self):
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)
