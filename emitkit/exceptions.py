# Event emitter exceptions


class EventEmitterError(Exception):
    """Base exception for all errors raised by an EventEmitter."""

    pass


class InvalidEventNameError(ValueError, EventEmitterError):
    """Exception raised when an event name is not on the emitter's list of valid events."""

    pass


class InvalidListenerError(TypeError, EventEmitterError):
    """Exception raised when a value that is not callable is used as a listener."""

    pass


class InvalidRegistryError(TypeError, EventEmitterError):
    """Exception raised when the events registry is replaced with an unsupported container."""

    pass


class InvalidArgumentError(ValueError, EventEmitterError):
    """Exception raised for invalid configuration values (listener counts, options, error directives)."""

    pass


class ListenerOverflowWarning(RuntimeWarning):
    """Warning issued once per event when more listeners are added than the configured maximum."""
