"""Notifications emitted while a turn extracts and writes files."""

from appforge.domain.events.event_types import GenerationEventType
from appforge.domain.events.event import GenerationEvent
from appforge.domain.events.observer import GenerationObserver
from appforge.domain.events.emitter import GenerationEventEmitter
from appforge.domain.events.stderr_observer import StderrEventObserver

__all__ = [
    "GenerationEventType",
    "GenerationEvent",
    "GenerationObserver",
    "GenerationEventEmitter",
    "StderrEventObserver",
]
