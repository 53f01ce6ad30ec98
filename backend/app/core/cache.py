"""
In-memory TTL cache for API responses.

Entries carry their own TTL and a version tag; a version mismatch on read
drops the entry. When the cache is full, expired entries are evicted first,
then the least recently used ones.
"""
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from cachetools import TLRUCache

from app.core.config import settings

logger = logging.getLogger(__name__)

DEFAULT_VERSION = "1.0"


@dataclass(frozen=True)
class CacheItem:
    data: Any
    timestamp: float
    expires_at: float
    version: str


class CacheTTL:
    """Cache durations in seconds."""
    SHORT = 2 * 60
    MEDIUM = 5 * 60
    LONG = 15 * 60
    VERY_LONG = 60 * 60


class CacheKeys:
    """Key builders for cached resources."""

    @staticmethod
    def user_profile(user_id: int) -> str:
        return f"user_profile_{user_id}"

    @staticmethod
    def trip_detail(trip_id: int) -> str:
        return f"trip_detail_{trip_id}"

    @staticmethod
    def clubs() -> str:
        return "clubs_list"

    @staticmethod
    def club_detail(club_id: int) -> str:
        return f"club_detail_{club_id}"

    @staticmethod
    def search_results(query: str, search_type: str, limit: int) -> str:
        return f"search_{search_type}_{query.lower()}_{limit}"

    BOOKING_PARTNERS = "booking_partners"
    BOOKING_FEATURES = "booking_features"
    SEARCH_PREFIX = "search_"


def _item_expiry(key, item: CacheItem, now: float) -> float:
    return item.expires_at


class ResponseCache:
    """Expiring key-value store with per-entry TTL and versioning."""

    def __init__(
        self,
        max_entries: int = 50,
        default_ttl: float = CacheTTL.MEDIUM,
        stale_threshold: float = CacheTTL.SHORT,
        timer: Callable[[], float] = time.time,
    ):
        self.max_entries = max_entries
        self.default_ttl = default_ttl
        self.stale_threshold = stale_threshold
        self._timer = timer
        self._store = TLRUCache(maxsize=max_entries, ttu=_item_expiry, timer=timer)
        self._lock = threading.RLock()

    def set(self, key: str, data: Any, ttl: Optional[float] = None, version: str = DEFAULT_VERSION) -> None:
        """Store data under key."""
        now = self._timer()
        item = CacheItem(
            data=data,
            timestamp=now,
            expires_at=now + (self.default_ttl if ttl is None else ttl),
            version=version,
        )
        with self._lock:
            self._store[key] = item

    def _live_item(self, key: str) -> Optional[CacheItem]:
        item = self._store.get(key)
        if item is None:
            return None
        if self._timer() > item.expires_at:
            self._store.pop(key, None)
            return None
        return item

    def get(self, key: str, version: str = DEFAULT_VERSION) -> Any:
        """Return cached data, or None when missing, expired or of another version."""
        with self._lock:
            item = self._live_item(key)
            if item is None:
                return None
            if item.version != version:
                self._store.pop(key, None)
                return None
            return item.data

    def has(self, key: str, version: str = DEFAULT_VERSION) -> bool:
        return self.get(key, version) is not None

    def remove(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    def remove_prefix(self, prefix: str) -> int:
        """Remove every entry whose key starts with prefix."""
        with self._lock:
            keys = [k for k in list(self._store.keys()) if k.startswith(prefix)]
            for key in keys:
                self._store.pop(key, None)
        return len(keys)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def metadata(self, key: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            item = self._live_item(key)
            if item is None:
                return None
            return {
                "timestamp": item.timestamp,
                "expires_at": item.expires_at,
                "version": item.version,
            }

    def is_stale(self, key: str, threshold: Optional[float] = None) -> bool:
        """True when the entry is missing or older than threshold (but maybe not expired)."""
        meta = self.metadata(key)
        if meta is None:
            return True
        limit = self.stale_threshold if threshold is None else threshold
        return (self._timer() - meta["timestamp"]) > limit

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            self._store.expire()
            items = list(self._store.values())
        oldest = min((item.timestamp for item in items), default=None)
        return {"total_items": len(items), "oldest_item": oldest}

    def __len__(self) -> int:
        with self._lock:
            self._store.expire()
            return len(self._store)


response_cache = ResponseCache(
    max_entries=settings.CACHE_MAX_ENTRIES,
    default_ttl=settings.CACHE_DEFAULT_TTL_SECONDS,
    stale_threshold=settings.CACHE_STALE_SECONDS,
)
