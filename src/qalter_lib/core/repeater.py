# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from collections.abc import Callable, Sequence
from typing import Any, TypeAlias

ExceptionHandler: TypeAlias = Callable[[BaseException, "Repeater"], Any]


class Repeater:
    """
    Call a function once for every item of a sequence, passing failures
    of the registered exception types to handlers instead of stopping.

    Attributes:
        items (Sequence[Any]): Items to process, in order.
        encountered_errors (dict[int, BaseException]): Exceptions passed to a handler,
            keyed by the index of the item that raised them.
        current_iteration (int): Index of the item being (or last) processed.
    """

    def __init__(self, items: Sequence[Any], func: Callable, *args: Any, **kwargs: Any):
        """
        Args:
            items (Sequence[Any]): Items to iterate over.
            func (Callable): Function called as `func(item, *args, **kwargs)`.
            *args (Any): Extra positional arguments for `func`.
            **kwargs (Any): Extra keyword arguments for `func`.
        """
        self.items = items
        self.encountered_errors: dict[int, BaseException] = {}
        self.current_iteration = 0

        self._call = lambda item: func(item, *args, **kwargs)
        self._handlers: dict[type[BaseException], ExceptionHandler] = {}

    def onException(self, exc_type: type[BaseException], handler: ExceptionHandler) -> None:
        """
        Handle exceptions of `exc_type` (and its subclasses) with `handler`.

        The handler receives the exception and this repeater. When handlers
        are registered for several classes of an exception's hierarchy,
        the one closest to the exception's own class is used.
        """
        self._handlers[exc_type] = handler

    def run(self) -> None:
        """
        Process all items.

        Raises:
            BaseException: Any exception without a registered handler,
                which stops the iteration.
        """
        handled = tuple(self._handlers)

        for index, item in enumerate(self.items):
            self.current_iteration = index
            try:
                self._call(item)
            except handled as e:
                self.encountered_errors[index] = e
                self._getHandler(type(e))(e, self)

    def _getHandler(self, exc_type: type[BaseException]) -> ExceptionHandler:
        """Return the handler registered for the nearest class in the MRO of `exc_type`."""
        return next(self._handlers[cls] for cls in exc_type.__mro__ if cls in self._handlers)
