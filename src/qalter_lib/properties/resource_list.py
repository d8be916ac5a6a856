# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Splitting of resource lists supplied with `-l`.

A resource list has the form `name[=value][,name[=value]...]`. Values may be
enclosed in single or double quotes, in which case commas inside the quotes
do not separate resources. The values themselves are not interpreted; they
are validated by the batch server.
"""

from qalter_lib.core.config import CFG
from qalter_lib.core.error import QalterParseError
from qalter_lib.core.logger import get_logger

logger = get_logger(__name__)

# error code signalling a generic illegal value (no position is reported)
ILLEGAL_VALUE = 1


def parse_resource_list(text: str) -> list[tuple[str, str]]:
    """
    Split a resource list into (resource, value) pairs.

    Args:
        text (str): The resource list.

    Returns:
        list[tuple[str, str]]: Resources in the order of their appearance.
            Resources specified without a value have an empty value.

    Raises:
        QalterParseError: If the resource list is malformed. Code `1` denotes
            a generic illegal value; larger codes denote a server error code
            with the position of the offending character.
    """
    resources: list[tuple[str, str]] = []
    pos = 0
    length = len(text)

    while pos < length:
        while pos < length and text[pos].isspace():
            pos += 1

        start = pos
        while pos < length and not text[pos].isspace() and text[pos] not in "=,":
            pos += 1

        if pos == start:
            raise QalterParseError("missing resource name", ILLEGAL_VALUE, pos)
        name = text[start:pos]

        while pos < length and text[pos].isspace():
            pos += 1

        value = ""
        if pos < length and text[pos] == "=":
            pos += 1
            value, pos = _read_value(text, pos)

        while pos < length and text[pos].isspace():
            pos += 1

        if pos < length:
            if text[pos] != ",":
                raise QalterParseError(
                    f"unexpected character after resource '{name}'",
                    CFG.error_codes.bad_attribute_value,
                    pos,
                )
            pos += 1
            # a trailing comma must be followed by another resource
            if pos == length:
                raise QalterParseError("missing resource name", ILLEGAL_VALUE, pos)

        logger.debug(f"Parsed resource '{name}' with value '{value}'.")
        resources.append((name, value))

    return resources


def _read_value(text: str, pos: int) -> tuple[str, int]:
    """Read a possibly quoted resource value starting at `pos`."""
    length = len(text)
    while pos < length and text[pos].isspace():
        pos += 1

    if pos < length and text[pos] in "\"'":
        quote = text[pos]
        end = text.find(quote, pos + 1)
        if end == -1:
            raise QalterParseError(
                "unterminated quoted value", CFG.error_codes.bad_attribute_value, pos
            )
        return text[pos + 1 : end], end + 1

    start = pos
    while pos < length and text[pos] != ",":
        pos += 1

    value = text[start:pos].rstrip()
    if not value:
        raise QalterParseError(
            "missing resource value", CFG.error_codes.bad_attribute_value, start
        )

    return value, pos
