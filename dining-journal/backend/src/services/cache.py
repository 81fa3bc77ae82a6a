from __future__ import annotations

import copy
import logging
import time
from collections import OrderedDict
from typing import Optional, Tuple, Union

from models import StatisticsResult
from services.invalidation import RESTAURANTS_CHANGED, VISITS_CHANGED, InvalidationChannel

logger = logging.getLogger(__name__)

CacheKey = Tuple[str, Union[str, int], str]  # (snapshot fingerprint, period, config fingerprint)


class StatsCache:
    """Per-engine result cache keyed by the exact snapshot, period and settings."""

    def __init__(self, max_entries: int = 64, ttl_sec: int = 600) -> None:
        self._entries: OrderedDict[CacheKey, StatisticsResult] = OrderedDict()
        self._stored_at: dict[CacheKey, float] = {}
        self.max_entries = max(1, max_entries)
        self.ttl_sec = ttl_sec
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: CacheKey) -> Optional[StatisticsResult]:
        self._cleanup()
        result = self._entries.get(key)
        if result is None:
            self.misses += 1
            return None
        self._entries.move_to_end(key)
        self.hits += 1
        logger.debug("stats cache hit period=%s", key[1])
        return copy.deepcopy(result)

    def put(self, key: CacheKey, result: StatisticsResult) -> None:
        self._cleanup()
        self._entries[key] = copy.deepcopy(result)
        self._entries.move_to_end(key)
        self._stored_at[key] = time.time()
        while len(self._entries) > self.max_entries:
            old, _ = self._entries.popitem(last=False)
            self._stored_at.pop(old, None)

    def clear(self, topic: Optional[str] = None) -> None:
        if self._entries:
            logger.debug("stats cache cleared (%s), %d entries dropped", topic or "manual", len(self._entries))
        self._entries.clear()
        self._stored_at.clear()

    def bind(self, channel: InvalidationChannel) -> None:
        """Drop every entry whenever the host announces a mutation."""
        channel.subscribe(VISITS_CHANGED, self.clear)
        channel.subscribe(RESTAURANTS_CHANGED, self.clear)

    def _cleanup(self) -> None:
        """Remove expired entries."""
        now = time.time()
        expired = [key for key, ts in self._stored_at.items() if now - ts > self.ttl_sec]
        for key in expired:
            del self._entries[key]
            del self._stored_at[key]
