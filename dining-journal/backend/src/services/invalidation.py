from __future__ import annotations

import logging
from typing import Callable, Dict, List

logger = logging.getLogger(__name__)

VISITS_CHANGED = "visits:changed"
RESTAURANTS_CHANGED = "restaurants:changed"

Callback = Callable[[str], None]


class InvalidationChannel:
    """In-process pub/sub the host uses to announce snapshot mutations."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, List[Callback]] = {}

    def subscribe(self, topic: str, callback: Callback) -> None:
        handlers = self._subscribers.setdefault(topic, [])
        if callback not in handlers:
            handlers.append(callback)

    def unsubscribe(self, topic: str, callback: Callback) -> None:
        handlers = self._subscribers.get(topic, [])
        if callback in handlers:
            handlers.remove(callback)

    def publish(self, topic: str) -> int:
        """Notify subscribers of ``topic``; returns how many were called."""
        handlers = list(self._subscribers.get(topic, []))
        for handler in handlers:
            handler(topic)
        logger.debug("published %s to %d subscriber(s)", topic, len(handlers))
        return len(handlers)
