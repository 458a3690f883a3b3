"""Caller identity and privilege resolution.

Credentials are checked elsewhere; this module only reads the session
cookie that marks a caller as privileged and the forwarded address used
as the rate-limit key.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from company_search.core.rate_limiter import identity_from_forwarded_for
from company_search.utils.config import Config, get_config


@dataclass(frozen=True)
class AccessContext:
    identity: str
    is_privileged: bool


def resolve_access(
    forwarded_for: Optional[str],
    session_value: Optional[str],
    config: Optional[Config] = None,
) -> AccessContext:
    """Build the access context for one request.

    Args:
        forwarded_for: Raw X-Forwarded-For header value
        session_value: Value of the session cookie, if any
        config: Optional config (uses global config if None)

    Returns:
        AccessContext
    """
    config = config or get_config()
    privileged_value = config.get("access.privileged_value", "true")
    identity = identity_from_forwarded_for(
        forwarded_for, default=config.get("rate_limit.default_identity", "127.0.0.1")
    )
    return AccessContext(
        identity=identity,
        is_privileged=session_value is not None and session_value == privileged_value,
    )
