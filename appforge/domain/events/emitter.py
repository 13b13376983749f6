import logging
from datetime import datetime, timezone
from typing import Any

from appforge.domain.events.event import GenerationEvent
from appforge.domain.events.event_types import GenerationEventType
from appforge.domain.events.observer import GenerationObserver

logger = logging.getLogger(__name__)


class GenerationEventEmitter:
    """Fans events out to every subscribed observer, in subscription order.

    An observer that raises is logged and skipped; the turn carries on.
    """

    def __init__(self) -> None:
        self._observers: list[GenerationObserver] = []

    def subscribe(self, observer: GenerationObserver) -> None:
        self._observers.append(observer)

    def emit(self, event: GenerationEvent) -> None:
        logger.debug(event.describe())
        for observer in self._observers:
            try:
                observer.on_event(event)
            except Exception as e:
                logger.warning(f"Observer {observer!r} failed on {event.event_type.value}: {e}")

    def emit_type(
        self,
        event_type: GenerationEventType,
        path: str | None = None,
        **metadata: Any,
    ) -> GenerationEvent:
        """Build a timestamped event, dispatch it, and return it."""
        event = GenerationEvent(
            event_type=event_type,
            timestamp=datetime.now(timezone.utc),
            path=path,
            metadata=metadata,
        )
        self.emit(event)
        return event
