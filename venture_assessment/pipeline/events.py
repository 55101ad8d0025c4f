"""Pipeline events and the event bus that dispatches them.

The event set is closed: every observable pipeline transition is one of the
dataclasses below. Handlers subscribe to one event type or to every event.
A handler that raises is logged and skipped; later handlers still run.
"""

import logging
import threading
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineEvent:
    """Base class of all pipeline events."""


@dataclass(frozen=True)
class PipelineStarted(PipelineEvent):
    input_descriptor: str


@dataclass(frozen=True)
class PhaseStarted(PipelineEvent):
    phase_key: str
    estimated_duration: float


@dataclass(frozen=True)
class PhaseCompleted(PipelineEvent):
    phase_key: str
    duration_seconds: float
    data: Any = None


@dataclass(frozen=True)
class PhaseFailed(PipelineEvent):
    phase_key: str
    error: str


@dataclass(frozen=True)
class PipelineCompleted(PipelineEvent):
    results: Any


@dataclass(frozen=True)
class PipelineCancelled(PipelineEvent):
    phase_key: str | None


@dataclass(frozen=True)
class PipelineFailed(PipelineEvent):
    phase_key: str | None
    error: str


Handler = Callable[[PipelineEvent], Any]


class EventBus:
    """Synchronous publish/subscribe for pipeline events.
    
    Handlers are invoked in registration order, global handlers first.
    """
    
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._handlers: dict[type[PipelineEvent], list[Handler]] = defaultdict(list)
        self._global_handlers: list[Handler] = []
    
    def subscribe(self, event_type: type[PipelineEvent], handler: Handler) -> None:
        """Register handler for one event type."""
        with self._lock:
            self._handlers[event_type].append(handler)
    
    def subscribe_all(self, handler: Handler) -> None:
        """Register handler for every event."""
        with self._lock:
            self._global_handlers.append(handler)
    
    def unsubscribe(self, event_type: type[PipelineEvent], handler: Handler) -> bool:
        """Remove a typed handler. Returns True if it was registered."""
        with self._lock:
            try:
                self._handlers.get(event_type, []).remove(handler)
                return True
            except ValueError:
                return False
    
    def unsubscribe_all(self, handler: Handler) -> bool:
        """Remove a global handler. Returns True if it was registered."""
        with self._lock:
            try:
                self._global_handlers.remove(handler)
                return True
            except ValueError:
                return False
    
    def publish(self, event: PipelineEvent) -> None:
        """Dispatch an event to its global and typed handlers."""
        with self._lock:
            global_snapshot = list(self._global_handlers)
            typed_snapshot = list(self._handlers.get(type(event), []))
        
        for handler in global_snapshot + typed_snapshot:
            try:
                handler(event)
            except Exception:
                logger.exception(f"Error in handler {handler!r} for {type(event).__name__}")
    
    def clear(self) -> None:
        """Remove every handler."""
        with self._lock:
            self._handlers.clear()
            self._global_handlers.clear()
