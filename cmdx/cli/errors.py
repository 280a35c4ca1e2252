"""CLI error handling: turn domain errors into messages and exit codes."""

from functools import wraps

import typer
from click.exceptions import Exit

from cmdx.errors import CmdError, ReportedError


def report(e: CmdError) -> None:
    """Print e; fatal errors also end the invocation with exit code 1."""
    if isinstance(e, ReportedError):
        typer.echo(str(e))
        return
    typer.echo(f"ERROR: {e}", err=True)
    raise typer.Exit(1) from e


def error_feedback(f):
    """Wrap command to catch exceptions and report them before exiting.

    Reported conditions (unknown alias, alias exists, dangling alias) print a
    message and exit cleanly. Every other failure is echoed to stderr before
    raising SystemExit(1).
    """

    @wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except (SystemExit, Exit):
            raise
        except CmdError as e:
            report(e)
            return None
        except (ValueError, KeyError, TypeError) as e:
            typer.echo(f"Invalid input: {e}", err=True)
            raise typer.Exit(1) from e
        except OSError as e:
            typer.echo(f"File error: {e}", err=True)
            raise typer.Exit(1) from e
        except Exception as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1) from e

    return wrapper
