"""Core modules for Company Search."""

from company_search.core.access import AccessContext, resolve_access
from company_search.core.fields import (
    UNKNOWN_NAME,
    CandidateFieldExtractor,
    CanonicalFields,
    FieldExtractor,
    PatternFieldExtractor,
    extractor_for,
)
from company_search.core.index_cache import (
    IndexState,
    SearchIndexCache,
    get_index_cache,
    reset_index_cache,
    set_index_cache,
)
from company_search.core.indexer import IndexBuilder
from company_search.core.models import IndexRecord, ResultRow, make_result_id
from company_search.core.rate_limiter import (
    RateLimitDecision,
    RateLimiter,
    identity_from_forwarded_for,
)
from company_search.core.search import SearchEngine
from company_search.core.service import (
    UNLIMITED,
    CompanySearchService,
    OutcomeStatus,
    SearchOutcome,
)

__all__ = [
    # Fields
    "UNKNOWN_NAME",
    "CandidateFieldExtractor",
    "CanonicalFields",
    "FieldExtractor",
    "PatternFieldExtractor",
    "extractor_for",
    # Index
    "IndexBuilder",
    "IndexRecord",
    "IndexState",
    "SearchIndexCache",
    "get_index_cache",
    "reset_index_cache",
    "set_index_cache",
    # Search
    "ResultRow",
    "SearchEngine",
    "make_result_id",
    # Access / rate limiting
    "AccessContext",
    "RateLimitDecision",
    "RateLimiter",
    "identity_from_forwarded_for",
    "resolve_access",
    # Service
    "UNLIMITED",
    "CompanySearchService",
    "OutcomeStatus",
    "SearchOutcome",
]
