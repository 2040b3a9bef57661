"""
Time-bounded cache of the Text field ids of each content type.

Content types rarely change, so fetching them on every request is slow and
redundant. Entries expire ``ttl`` seconds after they are stored and every lookup
sweeps out whatever has expired, so keys that are never read again do not
pile up in a warm container.
"""

import logging
import time
from typing import Any, Callable, Dict, Hashable, Tuple

logger = logging.getLogger("TextFieldCache")
logger.setLevel(logging.INFO)

DEFAULT_TTL = 30


class TextFieldCache:
    """Keeps loaded values in memory for ``ttl`` seconds."""

    def __init__(self, ttl: float = DEFAULT_TTL, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self.clock = clock
        self.cache: Dict[Hashable, Tuple[float, Any]] = {}

    def get_or_populate(self, key: Hashable, loader: Callable[[], Any]) -> Any:
        """
        Return the cached value for ``key``, calling ``loader`` on a miss.

        There is no locking: two callers missing at the same time both call
        their loader, and the last one to finish wins.
        """
        now = self.clock()
        self.evict_expired(now)
        entry = self.cache.get(key)
        if entry is not None:
            return entry[1]

        logger.info("Text field cache miss, loading content types")
        value = loader()
        self.cache[key] = (self.clock() + self.ttl, value)
        return value

    def evict_expired(self, now: float) -> None:
        """Drop every entry stored more than ``ttl`` seconds before ``now``."""
        expired = [key for key, (expires_at, _) in self.cache.items() if expires_at <= now]
        for key in expired:
            self.cache.pop(key, None)

    def invalidate(self, key: Hashable) -> None:
        self.cache.pop(key, None)

    def clear(self) -> None:
        self.cache.clear()

    def __contains__(self, key: Hashable) -> bool:
        entry = self.cache.get(key)
        return entry is not None and self.clock() < entry[0]
