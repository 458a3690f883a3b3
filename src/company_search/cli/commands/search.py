"""Search command for querying the corpus from the terminal."""

from __future__ import annotations

import json

import click

from company_search.cli.decorators import handle_errors
from company_search.cli.output import OutputFormatter
from company_search.core.rate_limiter import DEFAULT_IDENTITY
from company_search.core.service import CompanySearchService, OutcomeStatus
from company_search.utils.logging import get_logger

logger = get_logger(__name__)
out = OutputFormatter()


@click.command(name="search")
@click.argument("query")
@click.option(
    "--guest",
    is_flag=True,
    default=False,
    help="Apply the free-tier rate limit, as for an unauthenticated caller",
)
@click.option(
    "--identity",
    default=DEFAULT_IDENTITY,
    show_default=True,
    help="Caller identity used for rate limiting with --guest",
)
@click.option("--json", "as_json", is_flag=True, help="Print the raw JSON result")
@handle_errors
def search_cmd(query, guest, identity, as_json):
    """Search companies whose name or CIN contains QUERY.

    \b
    Examples:
        company-search search acme
        company-search search U72200 --json
    """
    service = CompanySearchService.from_config()
    outcome = service.search(query, caller_identity=identity, is_privileged=not guest)

    if as_json:
        click.echo(json.dumps(outcome.to_dict(), indent=2, ensure_ascii=False))
    elif outcome.status is OutcomeStatus.OK:
        out.section(f"🔍 {len(outcome.results)} result(s) for '{query}'")
        for rank, row in enumerate(outcome.results, start=1):
            out.company(rank, row.to_dict())
        if guest:
            out.stats({"Remaining free searches": outcome.remaining}, indent="")

    if outcome.status is OutcomeStatus.RATE_LIMITED:
        out.error(outcome.error, abort=not as_json)
    outcome.raise_for_status()
