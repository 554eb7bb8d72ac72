"""
Cache utility.

In-process TTL cache with a sliding-window rate limiter, shared by all
searches in one process.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, TypeVar, Union

import config.settings as settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _RateLimited:
    """Sentinel type for a refused call."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "RATE_LIMITED"


# Returned by CacheService.with_rate_limit instead of calling compute_fn
RATE_LIMITED = _RateLimited()


@dataclass
class CacheEntry:
    value: Any
    expires_at: float  # Clock seconds


@dataclass(frozen=True)
class CacheStats:
    keys: int
    hits: int
    misses: int


class CacheService:
    """
    TTL key/value cache plus per-identity request throttling.

    Handles:
    - Entries that silently expire after their TTL
    - Compute-if-absent helper (no single-flight: concurrent callers
      for one absent key may both compute, the last write wins)
    - Sliding-window admission per caller identity

    Cache failures are logged and treated as misses, never raised.
    """

    def __init__(
        self,
        ttl_seconds: float = settings.CACHE_TTL_SECONDS,
        max_requests_per_window: int = settings.RATE_LIMIT_MAX_REQUESTS,
        window_seconds: float = settings.RATE_LIMIT_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic
    ):
        """
        Initialize cache service.

        Args:
            ttl_seconds: Default entry lifetime
            max_requests_per_window: Admissions allowed per identity per window
            window_seconds: Length of the sliding rate-limit window
            clock: Time source in seconds (injectable for tests)
        """
        self.ttl_seconds = ttl_seconds
        self.max_requests_per_window = max_requests_per_window
        self.window_seconds = window_seconds
        self._clock = clock

        self._entries: Dict[str, CacheEntry] = {}
        self._rate_windows: Dict[str, List[float]] = {}
        self._hits = 0
        self._misses = 0
        self._lock = threading.Lock()

        logger.info(
            f"Initialized CacheService with ttl={ttl_seconds}s, "
            f"limit={max_requests_per_window}/{window_seconds}s"
        )

    @staticmethod
    def make_key(prefix: str, params: Mapping[str, Any]) -> str:
        """
        Build a cache key from a prefix and parameters.

        Parameters are sorted by name so argument order never matters.
        """
        parts = "|".join(f"{name}:{params[name]}" for name in sorted(params))
        return f"{prefix}:{parts}"

    def get(self, key: str) -> Optional[Any]:
        """
        Get value from cache.

        Returns:
            Cached value, or None if never set or expired
        """
        try:
            with self._lock:
                entry = self._entries.get(key)
                if entry is not None and entry.expires_at <= self._clock():
                    del self._entries[key]
                    entry = None

                if entry is None:
                    self._misses += 1
                    return None

                self._hits += 1
                return entry.value
        except Exception as e:
            logger.warning(f"Cache get failed for key {key}: {e}")
            return None

    def set(self, key: str, value: Any, ttl_seconds: Optional[float] = None) -> None:
        """
        Store value, overwriting any existing entry and resetting its expiry.
        """
        ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds
        try:
            with self._lock:
                self._entries[key] = CacheEntry(value=value, expires_at=self._clock() + ttl)
        except Exception as e:
            logger.warning(f"Cache set failed for key {key}: {e}")

    def get_or_compute(
        self,
        key: str,
        compute_fn: Callable[[], T],
        ttl_seconds: Optional[float] = None
    ) -> T:
        """
        Return the cached value, or compute, store and return it.

        The lock is not held while compute_fn runs.
        """
        cached = self.get(key)
        if cached is not None:
            return cached

        computed = compute_fn()
        self.set(key, computed, ttl_seconds)
        return computed

    def with_rate_limit(self, identity: str, compute_fn: Callable[[], T]) -> Union[T, _RateLimited]:
        """
        Run compute_fn if identity is within its rate limit.

        Args:
            identity: Caller identity (each tracked independently)
            compute_fn: Work to run when admitted

        Returns:
            compute_fn's result, or RATE_LIMITED without calling compute_fn
        """
        if not self._admit(identity):
            logger.warning(f"Rate limit exceeded for {identity}")
            return RATE_LIMITED

        return compute_fn()

    def _admit(self, identity: str) -> bool:
        """Prune the identity's window and record this request if it fits."""
        with self._lock:
            now = self._clock()
            window_start = now - self.window_seconds
            recent = [ts for ts in self._rate_windows.get(identity, []) if ts > window_start]

            if len(recent) >= self.max_requests_per_window:
                self._rate_windows[identity] = recent
                return False

            recent.append(now)
            self._rate_windows[identity] = recent
            return True

    def clear(self) -> None:
        """Drop all entries and reset hit/miss counters. Rate windows survive."""
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0
        logger.info("Cache cleared")

    def stats(self) -> CacheStats:
        with self._lock:
            now = self._clock()
            live = sum(1 for entry in self._entries.values() if entry.expires_at > now)
            return CacheStats(keys=live, hits=self._hits, misses=self._misses)


# Design Rationale and Trade-offs:
#
# 1. Why an in-process dict instead of Redis?
#    - Single-process service, no extra infrastructure
#    - Trade-off: Cache is lost on restart and not shared between workers
#
# 2. Why one lock for entries, stats and rate windows?
#    - All operations are short dict updates
#    - Trade-off: Independent keys contend on the same lock
#
# 3. Why no single-flight in get_or_compute?
#    - compute_fn runs outside the lock, so a slow search never blocks hits
#    - Trade-off: Concurrent misses for one key may compute twice
#
# 4. Why a falsy RATE_LIMITED sentinel instead of an exception?
#    - Refusal is an expected outcome, not an error
#    - Trade-off: Callers must check the return value
