"""Listener records, registration options and the per-emit context."""

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from emitkit.exceptions import InvalidArgumentError

if TYPE_CHECKING:
    from .emitter import EventEmitter


@dataclass(eq=False)
class Listener:
    """A registered callback and the number of invocations it has left.

    Records compare by identity, so the same callback registered twice yields two
    independent records.

    Attributes:
        callback: The function invoked on emit. It may return a plain value or an awaitable.
        count: Remaining invocations; ``math.inf`` for listeners that never expire.
    """

    callback: Callable[..., Any]
    count: Union[int, float] = math.inf


@dataclass
class EmissionContext:
    """State of a single emit call, passed as the first argument to every listener.

    Attributes:
        emitter: The emitter dispatching the event.
        results: Results collected so far; this is the list returned by ``emit``.
        args: The positional arguments every listener receives after the context.
    """

    emitter: "EventEmitter"
    results: List[Any] = field(default_factory=list)
    args: List[Any] = field(default_factory=list)


class ListenerOptions(BaseModel):
    """Options accepted by ``EventEmitter.add_listener``.

    Attributes:
        count: Maximum number of times the listener is invoked before it is removed.
        prepend: Insert the listener at the beginning of the list instead of the end.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    count: Union[int, float] = math.inf
    prepend: bool = False

    @field_validator("count", mode="before")
    @classmethod
    def validate_count(cls, value):
        """Accept a positive integer or infinity; ``None`` means unlimited."""
        if value is None:
            return math.inf
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"count must be a positive integer or math.inf, got {value!r}")
        if value == math.inf:
            return value
        if isinstance(value, float) or value < 1:
            raise ValueError(f"count must be a positive integer or math.inf, got {value!r}")
        return value


def coerce_options(options: Optional[Union[ListenerOptions, Mapping[str, Any]]]) -> ListenerOptions:
    """Build a ListenerOptions from ``None``, a mapping, or an existing instance.

    Raises:
        InvalidArgumentError: If the options fail validation.
    """
    if options is None:
        return ListenerOptions()
    if isinstance(options, ListenerOptions):
        return options
    try:
        return ListenerOptions.model_validate(options)
    except ValidationError as e:
        raise InvalidArgumentError(f"Invalid listener options: {options!r}") from e
