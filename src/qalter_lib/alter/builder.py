# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from qalter_lib.core.common import print_parse_error
from qalter_lib.core.error import QalterParseError
from qalter_lib.core.logger import get_logger
from qalter_lib.properties.attributes import OPTION_ATTRIBUTES, Attribute, AttributeEdit
from qalter_lib.properties.date import convert_date
from qalter_lib.properties.equal_string import parse_equal_string
from qalter_lib.properties.resource_list import ILLEGAL_VALUE, parse_resource_list

logger = get_logger(__name__)


class AttributeBuilder:
    """
    Translates qalter options into an ordered list of attribute edits.

    Invalid option values are reported and counted but do not stop the
    processing of further options, so that all problems are reported at once.

    Attributes:
        errors (int): Number of option values rejected so far.
    """

    # options whose values are stored without leading whitespace
    STRIPPED_OPTIONS = frozenset("mph")

    def __init__(self):
        self._edits: list[AttributeEdit] = []
        self.errors = 0

    @property
    def edits(self) -> tuple[AttributeEdit, ...]:
        """Attribute edits collected so far, in order."""
        return tuple(self._edits)

    def add(self, option: str, argument: str) -> bool:
        """
        Translate a single option and its argument into attribute edits.

        Args:
            option (str): The option letter (without the leading dash).
            argument (str): The argument of the option.

        Returns:
            bool: True if the argument was accepted, False if it was rejected.
        """
        match option:
            case "a":
                accepted = self._addExecutionTime(argument)
            case "c":
                accepted = self._addCheckpoint(argument)
            case "l":
                accepted = self._addResources(argument)
            case "r":
                accepted = self._addRerunable(argument)
            case "W":
                accepted = self._addExtended(argument)
            case _ if option in OPTION_ATTRIBUTES:
                if option in self.STRIPPED_OPTIONS:
                    argument = argument.lstrip()
                self._append(OPTION_ATTRIBUTES[option], argument)
                accepted = True
            case _:
                logger.error(f"invalid option -- '{option}'")
                accepted = False

        if not accepted:
            self.errors += 1
        return accepted

    def _append(self, name: str, value: str, resource: str | None = None) -> None:
        edit = AttributeEdit(name, value, resource)
        logger.debug(f"Adding attribute edit '{edit.toStr()}'.")
        self._edits.append(edit)

    def _addExecutionTime(self, argument: str) -> bool:
        if (after := convert_date(argument)) < 0:
            logger.error("illegal -a value")
            return False

        self._append(Attribute.EXECUTION_TIME, str(after))
        return True

    def _addCheckpoint(self, argument: str) -> bool:
        argument = argument.lstrip()
        # unsetting the checkpoint interval is not supported by qalter
        if argument == "u":
            logger.error("illegal -c value")
            return False

        self._append(Attribute.CHECKPOINT, argument)
        return True

    def _addResources(self, argument: str) -> bool:
        try:
            resources = parse_resource_list(argument)
        except QalterParseError as e:
            if e.code > ILLEGAL_VALUE:
                logger.error(f"illegal -l value: {e}")
                print_parse_error(argument, e.position)
            else:
                logger.error("illegal -l value")
            return False

        for resource, value in resources:
            self._append(Attribute.RESOURCE_LIST, value, resource)
        return True

    def _addRerunable(self, argument: str) -> bool:
        if argument not in ("y", "n"):
            logger.error("illegal -r value")
            return False

        self._append(Attribute.RERUNABLE, argument)
        return True

    def _addExtended(self, argument: str) -> bool:
        argument = argument.lstrip()
        if not argument:
            logger.error("illegal -W value")
            return False

        try:
            pairs = parse_equal_string(argument)
        except QalterParseError:
            logger.error("illegal -W value")
            return False

        for keyword, value in pairs:
            self._append(keyword, value)
        return True
