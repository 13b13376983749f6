import click

from appforge.domain.events.event import GenerationEvent


class StderrEventObserver:
    """Prints one ``[EVENT] ...`` line per event to stderr (``--events``)."""

    def on_event(self, event: GenerationEvent) -> None:
        click.echo(f"[EVENT] {event.describe()}", err=True)
