# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Parsing of `keyword=value` lists supplied with `-W`.

The accepted form is `name1=value1[,value2...][,name2=value3[,value4...]]`.
A comma-separated segment that contains no unquoted `=` continues the value
of the preceding keyword, so values such as `stagein=a@host:b,c@host:d`
keep their commas. Quoted text is copied verbatim.
"""

from qalter_lib.core.error import QalterParseError
from qalter_lib.core.logger import get_logger

logger = get_logger(__name__)

# error code reported for any malformed keyword list
MALFORMED = -1


def parse_equal_string(text: str) -> list[tuple[str, str]]:
    """
    Split a keyword list into (keyword, value) pairs.

    Args:
        text (str): The keyword list.

    Returns:
        list[tuple[str, str]]: Keywords and their values in the order of appearance.

    Raises:
        QalterParseError: If the list does not start with a keyword,
            contains an empty keyword, or contains an unterminated quote.
    """
    pairs: list[tuple[str, str]] = []

    for segment, offset in _split_segments(text):
        eq = _find_unquoted(segment, "=")

        if eq == -1:
            if not pairs:
                raise QalterParseError("missing keyword", MALFORMED, offset)
            keyword, value = pairs[-1]
            pairs[-1] = (keyword, f"{value},{segment.strip()}")
            continue

        keyword = segment[:eq].strip()
        if not keyword:
            raise QalterParseError("empty keyword", MALFORMED, offset)

        pairs.append((keyword, segment[eq + 1 :].strip()))

    logger.debug(f"Parsed keyword list '{text}' into {pairs}.")
    return pairs


def _split_segments(text: str) -> list[tuple[str, int]]:
    """Split `text` at unquoted commas, returning each segment with its offset."""
    segments = []
    quote = None
    quote_start = start = 0

    for i, char in enumerate(text):
        if quote:
            if char == quote:
                quote = None
        elif char in "\"'":
            quote = char
            quote_start = i
        elif char == ",":
            segments.append((text[start:i], start))
            start = i + 1

    if quote:
        raise QalterParseError("unterminated quote", MALFORMED, quote_start)

    segments.append((text[start:], start))
    return segments


def _find_unquoted(segment: str, char: str) -> int:
    """Return the index of the first unquoted `char` in `segment` or -1."""
    quote = None
    for i, c in enumerate(segment):
        if quote:
            if c == quote:
                quote = None
        elif c in "\"'":
            quote = c
        elif c == char:
            return i

    return -1
