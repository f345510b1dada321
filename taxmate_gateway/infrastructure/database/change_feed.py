"""Push-based change notification for stored records"""

import logging
import threading
from dataclasses import dataclass
from typing import Callable, List, Tuple

from taxmate_gateway.domain.models import BusinessType, TransactionRecord


@dataclass(frozen=True)
class RecordsChanged:
    """Full, consistent view of a user's inputs after a committed change"""

    user_id: str
    records: Tuple[TransactionRecord, ...]
    business_type: BusinessType


ChangeListener = Callable[[RecordsChanged], None]


class RecordChangeFeed:
    """Fan-out of RecordsChanged events to subscribers"""

    def __init__(self):
        self._listeners: List[ChangeListener] = []
        self._lock = threading.Lock()

    def subscribe(self, on_change: ChangeListener) -> Callable[[], None]:
        """Register a listener; returns a handle that removes it again"""
        with self._lock:
            self._listeners.append(on_change)

        def unsubscribe() -> None:
            with self._lock:
                if on_change in self._listeners:
                    self._listeners.remove(on_change)

        return unsubscribe

    def publish(self, event: RecordsChanged) -> None:
        with self._lock:
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(event)
            except Exception:
                # Delivery continues past a failing listener
                logging.exception(
                    "Change listener failed",
                    extra={"user_id": event.user_id, "step": "change_feed_publish"},
                )
