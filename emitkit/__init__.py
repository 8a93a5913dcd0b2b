"""In-process event emitter with ordered listeners, n-shot expiry and async result reconciliation."""

from .core import (
    NEW_LISTENER,
    REMOVE_LISTENER,
    EmissionContext,
    EventEmitter,
    EventsMap,
    Listener,
    ListenerOptions,
    OnError,
)
from .core.logging import setup_logging
from .exceptions import (
    EventEmitterError,
    InvalidArgumentError,
    InvalidEventNameError,
    InvalidListenerError,
    InvalidRegistryError,
    ListenerOverflowWarning,
)
from .settings import Settings

__all__ = [
    "NEW_LISTENER",
    "REMOVE_LISTENER",
    "EmissionContext",
    "EventEmitter",
    "EventEmitterError",
    "EventsMap",
    "InvalidArgumentError",
    "InvalidEventNameError",
    "InvalidListenerError",
    "InvalidRegistryError",
    "Listener",
    "ListenerOptions",
    "ListenerOverflowWarning",
    "OnError",
    "Settings",
    "setup_logging",
]
