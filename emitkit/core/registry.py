"""Backing container for an emitter's listeners."""

from typing import Any

from .listener import Listener


class EventsMap(dict[Any, list[Listener]]):
    """Maps event names to their ordered list of listener records.

    Only instances of this class can be installed as an emitter's registry, which lets
    several emitters share a single set of listeners.
    """
