"""CLI entry point for Company Search."""

from __future__ import annotations

import click

from company_search import __version__
from company_search.cli.commands import index_group, search, serve
from company_search.utils.config import load_config
from company_search.utils.logging import setup_logging


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    type=click.Path(exists=True),
    help="Path to config.yml file",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="Logging level",
)
@click.pass_context
def cli(ctx, config, log_level):
    """Company Search - substring lookup over tabular company records.

    \b
    Examples:
        # Scan ./data and write the index snapshot
        company-search index build

        # Search by name or CIN
        company-search search "acme"

        # Start the API server
        company-search serve --port 8000
    """
    ctx.ensure_object(dict)

    setup_logging(level=log_level)

    if config:
        load_config(config)


cli.add_command(index_group.index_group)
cli.add_command(search.search_cmd)
cli.add_command(serve.serve_cmd)


def main():
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
