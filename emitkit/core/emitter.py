"""EventEmitter: named events dispatched to ordered listener callbacks."""

import asyncio
import inspect
import logging
import math
import warnings
from typing import Any, Callable, Coroutine, Hashable, List, Mapping, Optional, Set, Tuple, Union

from emitkit.exceptions import (
    InvalidArgumentError,
    InvalidEventNameError,
    InvalidListenerError,
    InvalidRegistryError,
    ListenerOverflowWarning,
)
from emitkit.settings import Settings

from .error_policy import ErrorDirective, OnError, compact, handle_error, validate_on_error
from .listener import EmissionContext, Listener, ListenerOptions, coerce_options
from .registry import EventsMap

logger = logging.getLogger(__name__)

NEW_LISTENER = "new_listener"
REMOVE_LISTENER = "remove_listener"

Options = Optional[Union[ListenerOptions, Mapping[str, Any]]]


def _validate_max_listeners(count: Any) -> Union[int, float]:
    if isinstance(count, bool) or not isinstance(count, (int, float)):
        raise InvalidArgumentError(f"Invalid count: {count!r}")
    if count != math.inf and (isinstance(count, float) or count < 1):
        raise InvalidArgumentError(f"Invalid count: {count!r}")
    return count


def _same_callback(registered: Any, callback: Any) -> bool:
    if registered is callback:
        return True
    # Each attribute access builds a new bound method object.
    return (
        inspect.ismethod(registered)
        and inspect.ismethod(callback)
        and registered.__self__ is callback.__self__
        and registered.__func__ is callback.__func__
    )


def _without_count(options: Options) -> Options:
    if isinstance(options, Mapping):
        return {key: value for key, value in options.items() if key != "count"}
    return options


def _close_coroutines(results: List[Any]) -> None:
    for value in results:
        if inspect.iscoroutine(value):
            value.close()


def _normalize_args(args: Any) -> List[Any]:
    if args is None:
        return []
    if isinstance(args, (list, tuple)):
        return list(args)
    return [args]


class EventEmitter:
    """Stores listener functions and emits events to them.

    Typical usage:
        emitter = EventEmitter("ready", "closed")

        def on_ready(ctx, name):
            return f"hello {name}"

        emitter.on("ready", on_ready)
        emitter.emit("ready", "world")  # ["hello world"]

    Every listener is called with an ``EmissionContext`` followed by the emitted
    arguments. The emitter emits its own ``new_listener`` event before a listener is
    added and its own ``remove_listener`` event after a listener is removed.
    """

    def __init__(self, *events: Hashable, max_listeners: Optional[Union[int, float]] = None) -> None:
        """Create an emitter.

        Args:
            *events: Unique event names. When given, adding, removing or emitting any other
                event (except ``new_listener`` and ``remove_listener``) raises
                ``InvalidEventNameError``.
            max_listeners: Number of listeners per event above which a warning is issued.
                Defaults to the ``EMITKIT_MAX_LISTENERS`` setting.

        Raises:
            InvalidArgumentError: If an event name is repeated or ``max_listeners`` is invalid.
        """
        self._events = EventsMap()
        self._warned: Set[Hashable] = set()

        valid_events: List[Hashable] = []
        if events:
            valid_events.extend([NEW_LISTENER, REMOVE_LISTENER])
            for index, event in enumerate(events):
                if event in valid_events:
                    raise InvalidArgumentError(f"Event #{index} is already on the list: {event!r}")
                valid_events.append(event)
        self._valid_events: Tuple[Hashable, ...] = tuple(valid_events)

        if max_listeners is None:
            max_listeners = Settings().get_max_listeners()
        self._max_listeners = _validate_max_listeners(max_listeners)

    @property
    def valid_events(self) -> Tuple[Hashable, ...]:
        """Event names accepted by this emitter; empty when any name is accepted."""
        return self._valid_events

    @property
    def max_listeners(self) -> Union[int, float]:
        return self._max_listeners

    def set_max_listeners(self, count: Union[int, float]) -> "EventEmitter":
        """Set the number of listeners per event above which a warning is issued.

        Args:
            count: A positive integer, or ``math.inf`` for an unlimited number of listeners.

        Raises:
            InvalidArgumentError: For any other value.
        """
        self._max_listeners = _validate_max_listeners(count)
        return self

    @property
    def events(self) -> EventsMap:
        """The registry of listeners, keyed by event name."""
        return self._events

    @events.setter
    def events(self, events: EventsMap) -> None:
        if not isinstance(events, EventsMap):
            raise InvalidRegistryError(f"Invalid events object: {events!r}")
        logger.debug(f"Replacing events registry ({len(events)} events)")
        self._events = events

    def set_events(self, events: EventsMap) -> "EventEmitter":
        """Replace the registry of listeners, e.g. to share it with another emitter."""
        self.events = events
        return self

    def listeners(self, event: Hashable) -> List[Listener]:
        """Get the live list of listeners for an event.

        The list is created on first access. Mutating it changes the registered listeners.

        Raises:
            InvalidEventNameError: If the event is not on the list of valid events.
        """
        if self._valid_events and event not in self._valid_events:
            raise InvalidEventNameError(f"Invalid event name: {event!r}")
        listeners = self._events.get(event)
        if listeners is None:
            listeners = self._events[event] = []
        return listeners

    def add_listener(
        self,
        event: Hashable,
        listener: Union[Callable[..., Any], List[Callable[..., Any]], Tuple[Callable[..., Any], ...]],
        options: Options = None,
    ) -> "EventEmitter":
        """Add one or more listener functions to the listener list of an event.

        Args:
            event: Event name.
            listener: A function, or a list of functions added in order.
            options: ``ListenerOptions`` or a mapping with ``count`` (maximum number of calls
                before the listener is removed) and ``prepend`` (add to the front of the list).

        Raises:
            InvalidEventNameError: If the event is not on the list of valid events.
            InvalidListenerError: If an entry is not callable.
            InvalidArgumentError: If the options are invalid.
        """
        options = coerce_options(options)
        listeners = self.listeners(event)
        batch = listener if isinstance(listener, (list, tuple)) else [listener]
        for index, callback in enumerate(batch):
            if not callable(callback):
                raise InvalidListenerError(f"Invalid function #{index}: {callback!r}")
            self.emit(NEW_LISTENER, [event, callback, options])
            record = Listener(callback=callback, count=options.count)
            if options.prepend:
                listeners.insert(0, record)
            else:
                listeners.append(record)
            logger.debug(f"Added listener {callback!r} to {event!r} (count={options.count})")

        if len(listeners) > self._max_listeners and event not in self._warned:
            warnings.warn(
                f"Possible memory leak detected: {len(listeners)} listeners added to {event!r}",
                ListenerOverflowWarning,
                stacklevel=2,
            )
            self._warned.add(event)
        return self

    def on(self, event: Hashable, listener: Any, options: Options = None) -> "EventEmitter":
        """Add a listener that is called on every emit. See ``add_listener``."""
        options = coerce_options(_without_count(options)).model_copy(update={"count": math.inf})
        return self.add_listener(event, listener, options)

    def once(self, event: Hashable, listener: Any, options: Options = None) -> "EventEmitter":
        """Add a listener that is removed after its first call. See ``add_listener``."""
        options = coerce_options(_without_count(options)).model_copy(update={"count": 1})
        return self.add_listener(event, listener, options)

    def remove_listener(self, event: Hashable, listener: Any) -> "EventEmitter":
        """Remove listener functions from the listener list of an event.

        Only the first matching registration is removed; a function added several times must
        be removed as many times. Removing a function that is not registered does nothing.

        Args:
            event: Event name.
            listener: A function or ``Listener``, a list of them, or the list returned by
                ``listeners(event)``.

        Raises:
            InvalidEventNameError: If the event is not on the list of valid events.
            InvalidListenerError: If an entry is neither callable nor a ``Listener``.
        """
        listeners = self.listeners(event)
        if listener is listeners:
            batch = listeners.copy()
        elif isinstance(listener, (list, tuple)):
            batch = listener
        else:
            batch = [listener]

        for index, entry in enumerate(batch):
            callback = entry.callback if isinstance(entry, Listener) else entry
            if not callable(callback):
                raise InvalidListenerError(f"Invalid function #{index}: {entry!r}")
            for position, record in enumerate(listeners):
                if _same_callback(record.callback, callback):
                    del listeners[position]
                    logger.debug(f"Removed listener {callback!r} from {event!r}")
                    self.emit(REMOVE_LISTENER, [event, callback])
                    break
        return self

    off = remove_listener

    def remove_all_listeners(self, event: Optional[Hashable] = None) -> "EventEmitter":
        """Remove all listeners of an event, or of every event when no event is given.

        ``remove_listener`` notifications are sent for each removal; the listeners of
        ``remove_listener`` itself are removed last. Events first registered by those
        notifications during the sweep are cleared too.
        """
        if event is not None:
            return self.remove_listener(event, self.listeners(event))
        visited: Set[Hashable] = set()
        while True:
            names = [name for name in self._events if name != REMOVE_LISTENER and name not in visited]
            if not names:
                break
            for name in names:
                visited.add(name)
                self.remove_listener(name, self.listeners(name))
        return self.remove_all_listeners(REMOVE_LISTENER)

    def emit(self, event: Hashable, args: Any = None, on_error: ErrorDirective = OnError.RAISE) -> Optional[List[Any]]:
        """Synchronously call each listener of an event, in insertion order.

        Listeners added or removed while the event is being emitted do not affect the
        current call.

        Args:
            event: Event name.
            args: List (or tuple) of positional arguments. Any other value is passed as the
                single argument; ``None`` means no arguments.
            on_error: What to do when a listener raises:
                - ``OnError.RAISE``: Default. Propagate the error, skipping the remaining listeners.
                - ``OnError.IGNORE``: Drop the error.
                - ``OnError.RESULT``: Use the error as the listener's result.
                - a callable: Called with the error; its return value is used as the result
                  unless it is ``None``.

        Returns:
            The list of results, or ``None`` if the event has no listeners.

        Raises:
            InvalidEventNameError: If the event is not on the list of valid events.
            InvalidArgumentError: If ``on_error`` is not a valid directive.
        """
        context = EmissionContext(emitter=self, results=[], args=_normalize_args(args))
        if not self._dispatch(event, context, on_error):
            return None
        return context.results

    def _dispatch(self, event: Hashable, context: EmissionContext, on_error: ErrorDirective) -> bool:
        """Call the listeners of ``event`` into ``context.results``; False when there are none."""
        validate_on_error(on_error)
        listeners = self.listeners(event)
        snapshot = listeners.copy()
        if not snapshot:
            return False

        for listener in snapshot:
            listener.count -= 1
            if listener.count < 1 and listener in listeners:
                listeners.remove(listener)
                logger.debug(f"Listener {listener.callback!r} on {event!r} expired")
            try:
                context.results.append(listener.callback(context, *context.args))
            except Exception as error:
                handle_error(context.results, error, on_error)
        return True

    def emit_async(
        self, event: Hashable, args: Any = None, on_error: ErrorDirective = OnError.RAISE
    ) -> Optional[Coroutine[Any, Any, List[Any]]]:
        """Like ``emit``, but resolves awaitable results returned by async listeners.

        The listeners are called immediately, exactly as ``emit`` calls them. The returned
        coroutine awaits every awaitable result concurrently, replaces it with its value,
        and applies ``on_error`` to any that fail. A propagated failure is raised only after
        all awaitables have settled.

        If a listener error aborts the dispatch, coroutines already returned by earlier
        listeners are closed before the error is raised. Coroutines handed to the returned
        coroutine are only run when it is awaited; dropping it without awaiting leaves them
        unawaited.

        Returns:
            A coroutine resolving to the list of results, or ``None`` if the event has no
            listeners.
        """
        context = EmissionContext(emitter=self, results=[], args=_normalize_args(args))
        try:
            dispatched = self._dispatch(event, context, on_error)
        except Exception:
            _close_coroutines(context.results)
            raise
        if not dispatched:
            return None
        return self._settle(context.results, on_error)

    emit2 = emit_async

    async def _settle(self, results: List[Any], on_error: ErrorDirective) -> List[Any]:
        pending = []
        for index in range(len(results) - 1, -1, -1):
            if inspect.isawaitable(results[index]):
                pending.append((index, results[index]))

        failures: List[Exception] = []

        async def settle_one(index: int, awaitable: Any) -> None:
            try:
                results[index] = await awaitable
            except Exception as error:
                try:
                    handle_error(results, error, on_error, index)
                except Exception as propagated:
                    failures.append(propagated)

        if pending:
            await asyncio.gather(*(settle_one(index, awaitable) for index, awaitable in pending))
        if failures:
            raise failures[0]
        return compact(results)
