"""Search entry point: rate limiting, index readiness and search."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from company_search.core.index_cache import SearchIndexCache, get_index_cache
from company_search.core.models import ResultRow
from company_search.core.rate_limiter import RateLimiter
from company_search.core.search import SearchEngine
from company_search.exceptions import SearchFailure
from company_search.utils.config import Config, get_config
from company_search.utils.logging import get_logger

logger = get_logger(__name__)

# Reported as remaining quota for privileged callers
UNLIMITED = -1

RATE_LIMIT_MESSAGE = (
    "Free search limit exceeded ({limit}/day). Please login for unlimited access."
)


class OutcomeStatus(str, Enum):
    OK = "ok"
    RATE_LIMITED = "rate_limited"
    FAILED = "failed"


@dataclass
class SearchOutcome:
    """Result of one search call.

    Rate limiting and pipeline failures are reported here instead of being
    raised; ``raise_for_status`` converts a failure into ``SearchFailure``.
    """

    results: List[ResultRow] = field(default_factory=list)
    error: Optional[str] = None
    remaining: Optional[int] = None
    is_privileged: bool = False
    status: OutcomeStatus = OutcomeStatus.OK

    @property
    def ok(self) -> bool:
        return self.status is OutcomeStatus.OK

    def raise_for_status(self) -> SearchOutcome:
        if self.status is OutcomeStatus.FAILED:
            raise SearchFailure(self.error or "Search failed")
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "results": [row.to_dict() for row in self.results],
            "error": self.error,
            "remaining": self.remaining,
            "is_premium": self.is_privileged,
        }


class CompanySearchService:
    """Answers company queries for privileged and rate-limited callers."""

    def __init__(
        self,
        cache: SearchIndexCache,
        engine: SearchEngine,
        limiter: RateLimiter,
    ):
        self.cache = cache
        self.engine = engine
        self.limiter = limiter

    @classmethod
    def from_config(
        cls,
        config: Optional[Config] = None,
        cache: Optional[SearchIndexCache] = None,
    ) -> CompanySearchService:
        """Create a service from configuration.

        The process-wide index cache is shared only when ``config`` is the
        global config; any other config gets its own cache so the engine
        and the index always read the same corpus.

        Args:
            config: Optional config (uses global config if None)
            cache: Optional index cache (defaults as described above)

        Returns:
            CompanySearchService instance
        """
        if config is None or config is get_config():
            config = get_config()
            cache = cache or get_index_cache()
        else:
            cache = cache or SearchIndexCache.from_config(config)

        return cls(
            cache=cache,
            engine=SearchEngine.from_config(config),
            limiter=RateLimiter.from_config(config),
        )

    def search(
        self,
        query: Optional[str],
        caller_identity: str,
        is_privileged: bool = False,
    ) -> SearchOutcome:
        """Run one search for a caller.

        Short queries return nothing without consuming quota or touching
        the index. Unprivileged callers are checked against the rate limit
        before any index work.

        Args:
            query: Raw query string
            caller_identity: Rate-limit key of the caller
            is_privileged: Whether the caller bypasses the rate limit

        Returns:
            SearchOutcome

        Example:
            >>> outcome = service.search("acme", "203.0.113.7")
            >>> outcome.remaining
            9
        """
        if not self.engine.is_valid_query(query):
            return SearchOutcome(is_privileged=is_privileged)

        remaining = UNLIMITED
        if not is_privileged:
            decision = self.limiter.check(caller_identity)
            if not decision.allowed:
                return SearchOutcome(
                    error=RATE_LIMIT_MESSAGE.format(limit=self.limiter.max_queries),
                    remaining=0,
                    is_privileged=False,
                    status=OutcomeStatus.RATE_LIMITED,
                )
            remaining = decision.remaining

        records = self.cache.ensure_ready()

        try:
            results = self.engine.search(query, records)
        except Exception as e:
            logger.error(f"Critical error while searching '{query}': {e}", exc_info=True)
            return SearchOutcome(
                error=f"Search failed: {e}",
                remaining=remaining,
                is_privileged=is_privileged,
                status=OutcomeStatus.FAILED,
            )

        logger.info(
            f"Search '{query}' returned {len(results)} results "
            f"(privileged={is_privileged}, remaining={remaining})"
        )
        return SearchOutcome(
            results=results,
            remaining=remaining,
            is_privileged=is_privileged,
        )
