"""
In-process notification side-channel for hunt domain events

The engine publishes after each committed state change. Delivery is best
effort: a failing subscriber is logged and the engine result is unaffected.
Pollers read the bounded recent-events buffer by sequence number.
"""
import logging
import threading
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

HUNT_STARTED = "hunt_started"
HUNT_STOPPED = "hunt_stopped"
TEAM_ADVANCED = "team_advanced"
TEAM_COMPLETED = "team_completed"
DECOY_SCANNED = "decoy_scanned"
HINT_VIEWED = "hint_viewed"


@dataclass
class HuntEvent:
    kind: str
    event_id: str
    team_id: Optional[str] = None
    payload: Dict[str, Any] = field(default_factory=dict)
    occurred_at: datetime = field(default_factory=datetime.utcnow)
    sequence: int = 0


class HuntEventBus:
    def __init__(self, buffer_size: int = 500):
        self._subscribers: List[Callable[[HuntEvent], None]] = []
        self._recent = deque(maxlen=buffer_size)
        self._sequence = 0
        self._lock = threading.Lock()

    def subscribe(self, callback: Callable[[HuntEvent], None]) -> Callable[[], None]:
        """Register a callback, returns a function that removes it"""
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe():
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, kind: str, event_id: str, team_id: Optional[str] = None, **payload) -> HuntEvent:
        with self._lock:
            self._sequence += 1
            hunt_event = HuntEvent(kind=kind, event_id=event_id, team_id=team_id,
                                   payload=payload, sequence=self._sequence)
            self._recent.append(hunt_event)
            subscribers = list(self._subscribers)

        logger.debug("Publishing %s for event %s (team %s)", kind, event_id, team_id)
        for callback in subscribers:
            try:
                callback(hunt_event)
            except Exception:
                logger.exception("Subscriber failed while handling %s", kind)
        return hunt_event

    def recent(self, event_id: str, after: int = 0) -> List[HuntEvent]:
        with self._lock:
            return [e for e in self._recent if e.event_id == event_id and e.sequence > after]

    def clear(self):
        with self._lock:
            self._subscribers.clear()
            self._recent.clear()
            self._sequence = 0


bus = HuntEventBus()
