"""Size and age bounded cache for catalog search and detail results."""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import UTC, datetime, timedelta
from typing import Any

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheConfiguration:
    """Limits applied by :class:`ResultCache`."""

    max_age: timedelta = timedelta(days=7)
    max_size: int = 1000


@dataclass(frozen=True)
class CacheStats:
    search_count: int
    detail_count: int
    total_size: int


@dataclass(frozen=True)
class CacheEntry:
    """Cached payload with its insertion time and read count."""

    payload: object
    timestamp: datetime
    access_count: int = 1

    def accessed(self) -> "CacheEntry":
        return replace(self, access_count=self.access_count + 1)

    def is_expired(self, now: datetime, max_age: timedelta) -> bool:
        return now - self.timestamp > max_age


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


def normalized_query(query: str) -> str:
    return query.strip().lower()


def search_key(query: str, page: int = 1, page_size: int = 25) -> str:
    """Cache key of one page of search results."""
    return f"{normalized_query(query)}_p{page}_s{page_size}"


class ResultCache:
    """Two-map cache: search results by query page, food details by FDC id.

    Entries expire once older than ``config.max_age``. When the combined entry
    count exceeds ``config.max_size`` the least read entries are evicted, half
    of the overflow from each map. Every operation holds the cache's lock.
    """

    def __init__(
        self,
        config: CacheConfiguration | None = None,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self.config = config or CacheConfiguration()
        self._now = now or _utc_now
        self._lock = threading.Lock()
        self._search: dict[str, CacheEntry] = {}
        self._details: dict[int, CacheEntry] = {}

    def cached_search_results(
        self, query: str, page: int = 1, page_size: int = 25
    ) -> object | None:
        """Return cached search results, counting the read as a hit."""
        with self._lock:
            return self._read(self._search, search_key(query, page, page_size))

    def store_search_results(
        self, query: str, results: object, page: int = 1, page_size: int = 25
    ) -> None:
        with self._lock:
            self._search[search_key(query, page, page_size)] = CacheEntry(
                payload=results, timestamp=self._now()
            )
            self._cleanup_if_needed()

    def cached_food_details(self, fdc_id: int) -> object | None:
        """Return a cached detail payload, counting the read as a hit."""
        with self._lock:
            return self._read(self._details, fdc_id)

    def store_food_details(self, fdc_id: int, details: object) -> None:
        with self._lock:
            self._details[fdc_id] = CacheEntry(payload=details, timestamp=self._now())
            self._cleanup_if_needed()

    def search_entry(
        self, query: str, page: int = 1, page_size: int = 25
    ) -> CacheEntry | None:
        """Inspect a search entry without counting a hit or expiring it."""
        with self._lock:
            return self._search.get(search_key(query, page, page_size))

    def detail_entry(self, fdc_id: int) -> CacheEntry | None:
        """Inspect a detail entry without counting a hit or expiring it."""
        with self._lock:
            return self._details.get(fdc_id)

    def clear(self) -> None:
        with self._lock:
            self._search.clear()
            self._details.clear()

    def clear_expired(self) -> None:
        """Drop every expired entry from both maps."""
        with self._lock:
            now = self._now()
            max_age = self.config.max_age
            self._search = {
                key: entry
                for key, entry in self._search.items()
                if not entry.is_expired(now, max_age)
            }
            self._details = {
                key: entry
                for key, entry in self._details.items()
                if not entry.is_expired(now, max_age)
            }

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                search_count=len(self._search),
                detail_count=len(self._details),
                total_size=len(self._search) + len(self._details),
            )

    def _read(self, entries: dict[Any, CacheEntry], key: object) -> object | None:
        entry = entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._now(), self.config.max_age):
            entries.pop(key, None)
            return None
        entries[key] = entry.accessed()
        return entry.payload

    def _cleanup_if_needed(self) -> None:
        total = len(self._search) + len(self._details)
        overflow = total - self.config.max_size
        if overflow <= 0:
            return
        search_quota = min(overflow // 2, len(self._search))
        detail_quota = min(overflow - search_quota, len(self._details))
        # Whatever the detail map could not absorb comes from the search map.
        search_quota = min(overflow - detail_quota, len(self._search))

        _evict_least_accessed(self._search, search_quota)
        _evict_least_accessed(self._details, detail_quota)
        _logger.debug(
            "Cache evicted entries: search=%s detail=%s", search_quota, detail_quota
        )


def _evict_least_accessed(entries: dict[Any, CacheEntry], count: int) -> None:
    if count <= 0:
        return
    ordered = sorted(entries.items(), key=lambda item: item[1].access_count)
    for key, _entry in ordered[:count]:
        del entries[key]
