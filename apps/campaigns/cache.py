"""Per-process read caches for campaign listings and derived lookups."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, List, Optional, Set

from django.conf import settings  # type: ignore
from django.core.cache import caches  # type: ignore
from django.core.cache.backends.base import DEFAULT_TIMEOUT  # type: ignore

logger = logging.getLogger(__name__)

ALL_CAMPAIGNS_KEY = "campaigns:all"
ANALYTICS_KEY_PREFIX = "analytics:"

_MISSING = object()


def campaign_key(campaign_id: int) -> str:
    return f"campaign:{campaign_id}:detail"


def _campaign_pattern(campaign_id: int) -> str:
    # Trailing colon keeps campaign 1 from matching campaign 12.
    return f"campaign:{campaign_id}:"


class CacheLayer:
    """
    Two independent caches on top of Django's cache framework

    - `campaigns` alias: short TTL, campaign listing and detail entries
    - `lookups` alias: bounded LRU, derived data such as analytics summaries

    Written keys are tracked in a local registry so entries can be
    invalidated by substring. With CACHE_ENABLED off every read misses and
    every write is dropped.
    """

    def __init__(
        self,
        campaigns_alias: str = "campaigns",
        lookups_alias: str = "lookups",
        enabled: Optional[bool] = None,
        ttl: Optional[int] = None,
    ):
        self._caches = {
            campaigns_alias: caches[campaigns_alias],
            lookups_alias: caches[lookups_alias],
        }
        self.campaigns_alias = campaigns_alias
        self.lookups_alias = lookups_alias
        self.enabled = getattr(settings, "CACHE_ENABLED", True) if enabled is None else enabled
        self.ttl = ttl if ttl is not None else getattr(settings, "CAMPAIGN_CACHE_TIMEOUT", 10)
        self._registry: Dict[str, Set[str]] = {alias: set() for alias in self._caches}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._generation = 0

    def _record(self, hit: bool) -> None:
        with self._lock:
            if hit:
                self._hits += 1
            else:
                self._misses += 1

    def _get(self, alias: str, key: str) -> Any:
        if not self.enabled:
            return None
        value = self._caches[alias].get(key, _MISSING)
        self._record(value is not _MISSING)
        return None if value is _MISSING else value

    def _set(self, alias: str, key: str, value: Any, ttl: Any, generation: Optional[int] = None) -> bool:
        """Store `value`; with `generation`, only if nothing was invalidated since."""
        if not self.enabled:
            return False
        with self._lock:
            if generation is not None and generation != self._generation:
                logger.debug(f"Skipped caching '{key}': invalidated while it was being built")
                return False
            self._caches[alias].set(key, value, ttl)
            self._registry[alias].add(key)
        return True

    @property
    def generation(self) -> int:
        """Bumped by every invalidation."""
        with self._lock:
            return self._generation

    def _build_and_store(self, alias: str, key: str, builder: Callable[[], Any], ttl: Any) -> Any:
        generation = self.generation
        value = builder()
        if value is not None:
            self._set(alias, key, value, ttl, generation)
        return value

    # TTL cache

    def get(self, key: str) -> Any:
        """Cached value or None when absent or expired."""
        return self._get(self.campaigns_alias, key)

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        self._set(self.campaigns_alias, key, value, self.ttl if ttl is None else ttl)

    def get_or_set(self, key: str, builder: Callable[[], Any], ttl: Optional[int] = None) -> Any:
        """
        Cached value, or the result of `builder()` on a miss

        The built value is only stored when no invalidation ran while
        `builder` was reading, so a rebuild racing a booking never caches
        the pre-booking state.
        """
        cached = self.get(key)
        if cached is not None:
            return cached
        return self._build_and_store(
            self.campaigns_alias, key, builder, self.ttl if ttl is None else ttl
        )

    def get_or_set_campaigns(self, builder: Callable[[], List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
        """The full campaign listing, rebuilt from `builder` on a miss."""
        return self.get_or_set(ALL_CAMPAIGNS_KEY, builder)

    # LRU cache

    def get_lru(self, key: str) -> Any:
        return self._get(self.lookups_alias, key)

    def set_lru(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        self._set(self.lookups_alias, key, value, DEFAULT_TIMEOUT if ttl is None else ttl)

    def get_or_set_lru(self, key: str, builder: Callable[[], Any], ttl: Optional[int] = None) -> Any:
        cached = self.get_lru(key)
        if cached is not None:
            return cached
        return self._build_and_store(
            self.lookups_alias, key, builder, DEFAULT_TIMEOUT if ttl is None else ttl
        )

    # Invalidation

    def invalidate_pattern(self, pattern: str) -> int:
        """Delete every tracked key containing `pattern`, in both caches."""
        removed = 0
        with self._lock:
            self._generation += 1
            matches = {
                alias: [key for key in keys if pattern in key]
                for alias, keys in self._registry.items()
            }
            for alias, keys in matches.items():
                self._registry[alias].difference_update(keys)
        for alias, keys in matches.items():
            if keys:
                self._caches[alias].delete_many(keys)
                removed += len(keys)
        if removed:
            logger.debug(f"Invalidated {removed} cache entries matching '{pattern}'")
        return removed

    def invalidate_campaign(self, campaign_id: int) -> int:
        """Drop everything derived from one campaign's slot count."""
        removed = self.invalidate_pattern(_campaign_pattern(campaign_id))
        removed += self.invalidate_pattern(ALL_CAMPAIGNS_KEY)
        removed += self.invalidate_pattern(ANALYTICS_KEY_PREFIX)
        return removed

    def invalidate_all(self) -> None:
        with self._lock:
            self._generation += 1
            for keys in self._registry.values():
                keys.clear()
        for cache in self._caches.values():
            cache.clear()
        logger.info("Cleared campaign and lookup caches")

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "enabled": self.enabled,
                "campaignKeys": len(self._registry[self.campaigns_alias]),
                "lookupKeys": len(self._registry[self.lookups_alias]),
                "hits": self._hits,
                "misses": self._misses,
            }


__all__ = [
    "ALL_CAMPAIGNS_KEY",
    "ANALYTICS_KEY_PREFIX",
    "CacheLayer",
    "campaign_key",
]
