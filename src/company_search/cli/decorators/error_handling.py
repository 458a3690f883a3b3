"""Error handling decorators for CLI commands."""

from __future__ import annotations

import signal
import sys
from functools import wraps

import click

from company_search.exceptions import CompanySearchError
from company_search.utils.logging import get_logger

logger = get_logger(__name__)

# Handle SIGPIPE gracefully (prevent BrokenPipeError when piping to head, etc.)
try:
    signal.signal(signal.SIGPIPE, signal.SIG_DFL)
except AttributeError:
    # Windows doesn't have SIGPIPE
    pass


def handle_errors(f):
    """Decorator to handle common errors in CLI commands.

    Catches exceptions and displays user-friendly error messages,
    then aborts the command gracefully.

    Example:
        @click.command()
        @handle_errors
        def my_command():
            pass
    """

    @wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except (click.Abort, click.exceptions.Exit):
            raise
        except BrokenPipeError:
            sys.stdout = open("/dev/null", "w")
            sys.exit(0)
        except FileNotFoundError as e:
            click.echo(f"❌ File not found: {e}", err=True)
            raise click.Abort()
        except PermissionError as e:
            click.echo(f"❌ Permission denied: {e}", err=True)
            raise click.Abort()
        except CompanySearchError as e:
            click.echo(f"❌ {e}", err=True)
            logger.debug("Command failed", exc_info=True)
            raise click.Abort()
        except Exception as e:
            click.echo(f"❌ Unexpected error: {e}", err=True)
            logger.exception("Unexpected error in command")
            raise click.Abort()

    return wrapper
