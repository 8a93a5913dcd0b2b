"""Resolution of listener errors according to the caller's error directive."""

from enum import Enum
from typing import Any, Callable, List, Optional, Union

from emitkit.exceptions import InvalidArgumentError


class OnError(Enum):
    """Built-in behaviors for a listener that raises during emit."""

    RAISE = "raise"
    IGNORE = "ignore"
    RESULT = "result"


ErrorHandler = Callable[[Exception], Any]
ErrorDirective = Union[OnError, ErrorHandler]


class _Dropped:
    def __repr__(self) -> str:
        return "DROPPED"


# Placeholder for a result slot whose error was dropped while other slots were still pending.
DROPPED = _Dropped()


def validate_on_error(on_error: Any) -> ErrorDirective:
    """Check that ``on_error`` is an OnError member or a callable.

    Raises:
        InvalidArgumentError: For any other value.
    """
    if isinstance(on_error, OnError):
        return on_error
    # Enum classes are callable but are not handlers.
    if callable(on_error) and not (isinstance(on_error, type) and issubclass(on_error, Enum)):
        return on_error
    raise InvalidArgumentError(f"Invalid error directive: {on_error!r}")


def handle_error(
    results: List[Any], error: Exception, on_error: ErrorDirective, index: Optional[int] = None
) -> None:
    """Apply an error directive to a listener error.

    Without an index the outcome is appended to ``results``; with an index it replaces
    that slot. Dropped indexed slots are marked with ``DROPPED`` and removed later by
    ``compact`` so that the positions of unsettled slots stay valid.

    Args:
        results: The results of the current emit call.
        error: The exception raised by the listener (or by its awaitable).
        on_error: The directive supplied by the emit caller.
        index: Slot of the listener's result, when reconciling an awaitable.

    Raises:
        Exception: ``error`` itself when the directive is ``OnError.RAISE``.
    """
    if on_error is OnError.RAISE:
        raise error
    if on_error is OnError.RESULT:
        _store(results, error, index)
        return
    if on_error is not OnError.IGNORE:
        value = on_error(error)
        if value is not None:
            _store(results, value, index)
            return
    if index is not None:
        results[index] = DROPPED


def compact(results: List[Any]) -> List[Any]:
    """Remove dropped slots in place and return ``results``."""
    results[:] = [value for value in results if value is not DROPPED]
    return results


def _store(results: List[Any], value: Any, index: Optional[int]) -> None:
    if index is None:
        results.append(value)
    else:
        results[index] = value
