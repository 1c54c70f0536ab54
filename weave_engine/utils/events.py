# ABOUTME: Publish/subscribe channel for observing spell success checks
# ABOUTME: The resolver announces each step; logging, UI, and host integrations listen

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, DefaultDict, Dict, List, Tuple


logger = logging.getLogger(__name__)


class EventType(Enum):
    """Steps of a cast attempt that observers can react to."""
    SPELL_CHECK_BYPASSED = "spell_check_bypassed"
    SPELL_CHECK_SKIPPED = "spell_check_skipped"
    GRIT_ACCEPTED = "grit_accepted"
    GRIT_REJECTED = "grit_rejected"
    SPELL_CHECK_ROLLED = "spell_check_rolled"
    SPELL_FIZZLED = "spell_fizzled"
    SPELL_SLOT_CONSUMED = "spell_slot_consumed"
    DESPERATION_USED = "desperation_used"
    EXHAUSTION_GAINED = "exhaustion_gained"
    SPELL_CHECK_RESOLVED = "spell_check_resolved"


@dataclass
class Event:
    type: EventType
    data: Dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"{self.type.name}({self.data})"


EventHandler = Callable[[Event], None]


class EventBus:
    """
    Delivers events to handlers synchronously, in subscription order.

    Observers never influence a cast: an exception from one handler is
    logged and the remaining handlers still run.
    """

    def __init__(self):
        self._handlers: DefaultDict[EventType, List[EventHandler]] = defaultdict(list)

    def subscribe(self, event_type: EventType, handler: EventHandler) -> None:
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: EventType, handler: EventHandler) -> None:
        """Remove a handler; unknown handlers are ignored."""
        if handler in self._handlers.get(event_type, []):
            self._handlers[event_type].remove(handler)

    def handlers(self, event_type: EventType) -> Tuple[EventHandler, ...]:
        """Handlers currently subscribed to an event type."""
        return tuple(self._handlers.get(event_type, []))

    def emit(self, event: Event) -> None:
        from weave_engine.utils.logging_config import get_logging_config
        logging_config = get_logging_config()
        if logging_config:
            logging_config.log_event(event.type.name, event.data)

        for handler in self.handlers(event.type):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"{event.type.name} handler failed: {e}", exc_info=True)
