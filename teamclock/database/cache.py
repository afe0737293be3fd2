"""TTL cache layered over the local key-value store"""
import json
import logging
import time
from typing import Any, Callable, Optional

from teamclock.database.kv_store import KeyValueStore

logger = logging.getLogger(__name__)


class TTLCache:
    """
    Stores payloads as {"data": ..., "timestamp": ...} envelopes.

    An entry older than `ttl_seconds` is treated as absent and removed on
    the read that notices it. Payloads must be JSON serializable.
    """

    def __init__(self, store: KeyValueStore, ttl_seconds: int,
                 clock: Callable[[], float] = time.time):
        self.store = store
        self.ttl_seconds = ttl_seconds
        self.clock = clock

    def get(self, key: str) -> Optional[Any]:
        raw = self.store.get(key)
        if raw is None:
            return None

        try:
            entry = json.loads(raw)
            data = entry['data']
            captured_at = float(entry['timestamp'])
        except (ValueError, TypeError, KeyError) as e:
            logger.warning(f"Discarding unreadable cache entry {key}: {e}")
            self.store.delete(key)
            return None

        age = self.clock() - captured_at
        if age > self.ttl_seconds:
            logger.debug(f"Cache entry {key} expired ({age:.0f}s old)")
            self.store.delete(key)
            return None

        logger.debug(f"Cache HIT for {key}")
        return data

    def set(self, key: str, payload: Any) -> bool:
        envelope = {'data': payload, 'timestamp': self.clock()}
        return self.store.set(key, json.dumps(envelope, default=str))

    def invalidate(self, key: str) -> bool:
        return self.store.delete(key)
