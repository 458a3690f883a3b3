"""Company Search - substring lookup over tabular company records."""

__version__ = "0.1.0"

# Connectors
from company_search.connectors import (
    BaseRowSource,
    BatchTableSource,
    DelimitedTextSource,
    RowSourceFactory,
)

# Core modules
from company_search.core import (
    CompanySearchService,
    IndexBuilder,
    IndexRecord,
    IndexState,
    RateLimiter,
    ResultRow,
    SearchEngine,
    SearchIndexCache,
    SearchOutcome,
)

# Errors
from company_search.exceptions import (
    CompanySearchError,
    CorpusAccessError,
    ParseError,
    SearchFailure,
    SnapshotCorruptError,
)

# Utils
from company_search.utils.config import Config, get_config, load_config


# Lazy import for the optional HTTP layer
def __getattr__(name):
    """Lazy import for optional modules."""
    if name == "create_app":
        try:
            from company_search.api.server import create_app

            return create_app
        except ImportError as e:
            raise ImportError(
                "create_app requires additional dependencies. "
                "Install with: pip install company-search[api]"
            ) from e
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    # Version
    "__version__",
    # Core
    "CompanySearchService",
    "IndexBuilder",
    "IndexRecord",
    "IndexState",
    "RateLimiter",
    "ResultRow",
    "SearchEngine",
    "SearchIndexCache",
    "SearchOutcome",
    "create_app",
    # Connectors
    "BaseRowSource",
    "BatchTableSource",
    "DelimitedTextSource",
    "RowSourceFactory",
    # Errors
    "CompanySearchError",
    "CorpusAccessError",
    "ParseError",
    "SearchFailure",
    "SnapshotCorruptError",
    # Config
    "Config",
    "get_config",
    "load_config",
]
