"""Listener registry, error policy and dispatch for EventEmitter."""

from .emitter import NEW_LISTENER, REMOVE_LISTENER, EventEmitter
from .error_policy import DROPPED, OnError, handle_error
from .listener import EmissionContext, Listener, ListenerOptions
from .registry import EventsMap

__all__ = [
    "DROPPED",
    "NEW_LISTENER",
    "REMOVE_LISTENER",
    "EmissionContext",
    "EventEmitter",
    "EventsMap",
    "Listener",
    "ListenerOptions",
    "OnError",
    "handle_error",
]
