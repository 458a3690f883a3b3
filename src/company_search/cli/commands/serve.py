"""Serve command for starting API server."""

from __future__ import annotations

import click

from company_search.utils.logging import get_logger

logger = get_logger(__name__)


@click.command(name="serve")
@click.option(
    "--host",
    default="0.0.0.0",
    help="Host to bind to (default: 0.0.0.0)",
)
@click.option(
    "--port",
    "-p",
    type=int,
    default=8000,
    help="Port to bind to (default: 8000)",
)
@click.pass_context
def serve_cmd(ctx, host, port):
    """Start the FastAPI server.

    NOTE: Requires the 'api' extra: pip install company-search[api]

    \b
    Examples:
        company-search serve
        company-search serve --host localhost --port 8080
    """
    click.echo("🚀 Starting Company Search API server...")
    click.echo(f"   Host: {host}")
    click.echo(f"   Port: {port}")

    try:
        import uvicorn

        from company_search.api.server import create_app
    except ImportError:
        click.echo(
            "❌ FastAPI/Uvicorn not installed.\n"
            "   Please install with: pip install company-search[api]",
            err=True,
        )
        raise click.Abort()

    try:
        uvicorn.run(create_app(), host=host, port=port, log_level="info")
    except Exception as e:
        click.echo(f"❌ Server failed: {e}", err=True)
        raise click.Abort()
