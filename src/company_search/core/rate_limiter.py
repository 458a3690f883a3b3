"""Per-identity daily query limit for unprivileged callers."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from company_search.utils.config import Config, get_config
from company_search.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_IDENTITY = "127.0.0.1"


@dataclass
class RateLimitEntry:
    """Queries counted in the current window for one identity."""

    count: int
    window_start: float


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    remaining: int
    reset_at: float  # Epoch seconds when the current window ends


class RateLimiter:
    """Rolling-window counter keyed by caller identity.

    A window opens with an identity's first query and lasts
    ``window_seconds``; it is not aligned to calendar days. Only allowed
    queries are counted. ``check`` sweeps out expired entries at most once
    per window, so memory is bounded by the identities seen in the last two
    windows.

    Example:
        >>> limiter = RateLimiter(max_queries=10)
        >>> limiter.check("203.0.113.7")
        RateLimitDecision(allowed=True, remaining=9, reset_at=...)
    """

    def __init__(
        self,
        max_queries: int = 10,
        window_seconds: float = 24 * 60 * 60,
        clock: Callable[[], float] = time.time,
    ):
        self.max_queries = max_queries
        self.window_seconds = window_seconds
        self.clock = clock
        self._entries: Dict[str, RateLimitEntry] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    @classmethod
    def from_config(cls, config: Optional[Config] = None) -> RateLimiter:
        config = config or get_config()
        return cls(
            max_queries=config.get("rate_limit.max_queries", 10),
            window_seconds=config.get("rate_limit.window_seconds", 24 * 60 * 60),
        )

    def check(self, identity: str) -> RateLimitDecision:
        """Count one query for an identity if it is still within quota.

        The read, reset and increment happen under one lock, so concurrent
        queries from the same identity cannot lose updates.

        Args:
            identity: Caller identity key

        Returns:
            RateLimitDecision; ``remaining`` is 0 when denied
        """
        now = self.clock()
        with self._lock:
            if now - self._last_sweep >= self.window_seconds:
                self._drop_expired(now)

            entry = self._entries.get(identity)
            if entry is None or now - entry.window_start >= self.window_seconds:
                entry = RateLimitEntry(count=0, window_start=now)
                self._entries[identity] = entry

            reset_at = entry.window_start + self.window_seconds

            if entry.count >= self.max_queries:
                logger.info(f"Rate limit exceeded for {identity}")
                return RateLimitDecision(allowed=False, remaining=0, reset_at=reset_at)

            entry.count += 1
            return RateLimitDecision(
                allowed=True,
                remaining=self.max_queries - entry.count,
                reset_at=reset_at,
            )

    def peek(self, identity: str) -> int:
        """Remaining quota for an identity without consuming any."""
        now = self.clock()
        with self._lock:
            entry = self._entries.get(identity)
            if entry is None or now - entry.window_start >= self.window_seconds:
                return self.max_queries
            return max(self.max_queries - entry.count, 0)

    def purge_expired(self) -> int:
        """Drop entries whose window has elapsed.

        Returns:
            Number of entries removed
        """
        with self._lock:
            return self._drop_expired(self.clock())

    def _drop_expired(self, now: float) -> int:
        # Caller holds the lock
        expired = [
            identity
            for identity, entry in self._entries.items()
            if now - entry.window_start >= self.window_seconds
        ]
        for identity in expired:
            del self._entries[identity]
        self._last_sweep = now
        return len(expired)

    def reset(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def identity_from_forwarded_for(
    forwarded_for: Optional[str], default: str = DEFAULT_IDENTITY
) -> str:
    """Derive the rate-limit key from a client-supplied X-Forwarded-For value.

    The header is taken as-is (trimmed), so a caller can change identity by
    sending a different value.
    """
    if forwarded_for and forwarded_for.strip():
        return forwarded_for.strip()
    return default
