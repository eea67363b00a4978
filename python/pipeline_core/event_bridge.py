"""Lifecycle notifications for pipeline runs.

The EventBridge wraps a pyee EventEmitter. Pipelines constructed with
``events=bridge`` report each run through it: when the run starts, each
time a chain position is resolved, and when the run settles.

Example:
    >>> from pipeline_core import EventBridge, EventNames, Pipeline
    >>>
    >>> bridge = EventBridge.instance()
    >>> bridge.start()
    >>>
    >>> @bridge.subscribe(EventNames.PIPELINE_FAILED)
    ... def report(request, error):
    ...     sentry.capture_exception(error)
    ...
    >>> pipeline = Pipeline(container, events=bridge)
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from pyee.base import EventEmitter

from .logging import log_debug, log_info, log_trace

if TYPE_CHECKING:
    from .resolver import ResolvedMiddleware

Listener = Callable[..., Any]


class EventNames:
    """Names of the events a pipeline publishes.

    Attributes:
        PIPELINE_STARTED: ``handle`` was entered; no middleware has run yet.
        MIDDLEWARE_RESOLVED: A chain position was resolved and is about to run.
        PIPELINE_COMPLETED: ``handle`` is returning a result.
        PIPELINE_FAILED: ``handle`` is raising.
    """

    PIPELINE_STARTED = "pipeline.started"
    MIDDLEWARE_RESOLVED = "middleware.resolved"
    PIPELINE_COMPLETED = "pipeline.completed"
    PIPELINE_FAILED = "pipeline.failed"

    ALL = (PIPELINE_STARTED, MIDDLEWARE_RESOLVED, PIPELINE_COMPLETED, PIPELINE_FAILED)


# Positional payload of each event, in order.
EVENT_PAYLOADS: dict[str, tuple[str, ...]] = {
    EventNames.PIPELINE_STARTED: ("request",),
    EventNames.MIDDLEWARE_RESOLVED: ("index", "middleware"),
    EventNames.PIPELINE_COMPLETED: ("request", "response"),
    EventNames.PIPELINE_FAILED: ("request", "error"),
}


def _listener_name(listener: Listener) -> str:
    return getattr(listener, "__qualname__", None) or repr(listener)


class EventBridge:
    """Pub/sub bus for pipeline lifecycle events.

    Nothing is delivered until ``start()`` is called, and ``stop()`` drops
    every listener. A process normally shares the singleton returned by
    ``instance()``; pipelines accept any bridge.

    Listeners are called synchronously, in subscription order, from inside
    ``Pipeline.handle``. An exception raised by a listener propagates into
    the pipeline run.
    """

    _instance: EventBridge | None = None

    def __init__(self) -> None:
        self._emitter = EventEmitter()
        self._active = False

    @classmethod
    def instance(cls) -> EventBridge:
        """Return the process-wide bridge, creating it on first use."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Stop and discard the process-wide bridge (used by tests)."""
        bridge, cls._instance = cls._instance, None
        if bridge is not None:
            bridge.stop()

    @property
    def is_active(self) -> bool:
        """Whether published events are currently delivered."""
        return self._active

    @property
    def event_schema(self) -> dict[str, tuple[str, ...]]:
        """Payload argument names for each pipeline event (a copy)."""
        return dict(EVENT_PAYLOADS)

    def start(self) -> None:
        """Begin delivering events. Repeated calls are ignored."""
        if not self._active:
            self._active = True
            log_info("EventBridge: Started")

    def stop(self) -> None:
        """Stop delivering events and remove every listener.

        Repeated calls are ignored.
        """
        if self._active:
            self._active = False
            self._emitter.remove_all_listeners()
            log_info("EventBridge: Stopped")

    def subscribe(self, event: str, listener: Listener | None = None) -> Any:
        """Register a listener for an event.

        Can be called directly or used as a decorator when ``listener`` is
        omitted.

        Args:
            event: Event name, usually one of EventNames.
            listener: Callable receiving the event payload.

        Returns:
            The listener, or a decorator registering one.
        """
        if listener is None:
            return lambda fn: self.subscribe(event, fn)
        self._emitter.on(event, listener)
        log_debug(f"EventBridge: {_listener_name(listener)} subscribed to {event}")
        return listener

    def subscribe_once(self, event: str, listener: Listener) -> Listener:
        """Register a listener removed after its first delivery."""
        self._emitter.once(event, listener)
        log_debug(f"EventBridge: {_listener_name(listener)} subscribed once to {event}")
        return listener

    def unsubscribe(self, event: str, listener: Listener) -> None:
        """Remove a listener previously given to ``subscribe``."""
        self._emitter.remove_listener(event, listener)
        log_debug(f"EventBridge: {_listener_name(listener)} unsubscribed from {event}")

    def listener_count(self, event: str) -> int:
        """Return how many listeners an event has."""
        return len(self._emitter.listeners(event))

    def publish(self, event: str, *args: Any, **kwargs: Any) -> bool:
        """Deliver an event to its listeners.

        Args:
            event: Event name.
            *args: Positional payload.
            **kwargs: Keyword payload.

        Returns:
            True if the event was delivered, False if the bridge is inactive.
        """
        if not self._active:
            log_debug(f"EventBridge: Inactive, dropping {event}")
            return False
        log_trace(f"EventBridge: Publishing {event}")
        self._emitter.emit(event, *args, **kwargs)
        return True

    def pipeline_started(self, request: Any) -> None:
        self.publish(EventNames.PIPELINE_STARTED, request)

    def middleware_resolved(self, index: int, middleware: ResolvedMiddleware) -> None:
        self.publish(EventNames.MIDDLEWARE_RESOLVED, index, middleware)

    def pipeline_completed(self, request: Any, response: Any) -> None:
        self.publish(EventNames.PIPELINE_COMPLETED, request, response)

    def pipeline_failed(self, request: Any, error: BaseException) -> None:
        self.publish(EventNames.PIPELINE_FAILED, request, error)


__all__ = ["EventBridge", "EventNames", "EVENT_PAYLOADS"]
