import threading
import time
from typing import Any, Callable, Dict, Optional

from cuisine_core.core.logging_config import get_logger
from cuisine_core.models import CultureParserResult

logger = get_logger(__name__)


class ParseCache:
    """
    TTL cache for cultural intent results, keyed by normalized input.

    Writes are last-writer-wins. Once the cache grows past ``max_entries`` a
    sweep drops every expired entry. The lock only guards the dict; callers
    do their slow work (interpreter calls) between ``get`` and ``set``.
    """

    def __init__(
        self,
        ttl_seconds: int = 30 * 60,
        max_entries: int = 1000,
        clock: Callable[[], float] = time.time
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, key: str) -> Optional[CultureParserResult]:
        with self._lock:
            item = self._entries.get(key)
            if not item:
                self.misses += 1
                return None
            if item["expires_at"] < self._clock():
                self._entries.pop(key, None)
                self.misses += 1
                return None
            self.hits += 1
            return item["value"].model_copy(deep=True)

    def set(self, key: str, value: CultureParserResult) -> None:
        with self._lock:
            self._entries[key] = {
                "value": value.model_copy(deep=True),
                "expires_at": self._clock() + self.ttl_seconds
            }
            if len(self._entries) > self.max_entries:
                self._sweep()

    def _sweep(self) -> None:
        now = self._clock()
        expired = [k for k, item in self._entries.items() if item["expires_at"] < now]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug(f"Swept {len(expired)} expired parse cache entries")

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def hit_ratio(self) -> float:
        lookups = self.hits + self.misses
        return round(self.hits / lookups, 2) if lookups else 0.0
