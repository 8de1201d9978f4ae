"""
Event Bus

Routes timeline and playback events to subscribers. Handlers may be plain
functions or coroutines; a failing handler is logged and the rest still run.
"""

import inspect
from typing import Callable, Dict, List

from sequencer.models.events import Event, EventType
from sequencer.utils.logger import get_category_logger, LogCategory

log = get_category_logger(LogCategory.EVENT)

Handler = Callable[[Event], None]


def _handler_name(handler: Handler) -> str:
    return getattr(handler, "__qualname__", repr(handler))


class EventBus:
    """
    Async pub-sub for sequencer events.

    Example:
        bus = EventBus()
        bus.subscribe(EventType.TIMELINE_FRAME, on_frame)
        await player.seek(2.5)      # player publishes through the bus
    """

    def __init__(self):
        self._handlers: Dict[EventType, List[Handler]] = {}

    def subscribe(self, event_type: EventType, handler: Handler) -> None:
        """Call `handler` for every published event of `event_type`, in subscription order."""
        self._handlers.setdefault(event_type, []).append(handler)
        log.debug("Handler subscribed", event_type=event_type.name, handler=_handler_name(handler))

    async def publish(self, event: Event) -> None:
        for handler in list(self._handlers.get(event.type, [])):
            try:
                result = handler(event)
                if inspect.isawaitable(result):
                    await result
            except Exception as ex:
                log.error(
                    "Event handler failed",
                    event_type=event.type.name,
                    handler=_handler_name(handler),
                    error=str(ex),
                    error_type=type(ex).__name__,
                )
