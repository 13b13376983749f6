from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from appforge.domain.events.event import GenerationEvent


class GenerationObserver(Protocol):
    def on_event(self, event: "GenerationEvent") -> None:
        """Called synchronously, in the middle of the turn."""
        ...
