from __future__ import annotations
import asyncio
import logging
import sys
from typing import Optional

import typer
from rich import print
from rich.markup import escape
from dotenv import load_dotenv

from . import __version__
from .ascii_art import print_banner
from .config import Settings
from .errors import GitLogError
from .logging_config import configure_logging
from .pipeline import generate_report
from .report import write_report
from .session import Session, validate_repository

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

app = typer.Typer(add_completion=False, help="Save a snapshot of a git repository's staged and unstaged changes.")

COMMANDS = ["run", "report", "version", "--help"]


def _settings(timeout: Optional[float], log_level: Optional[str], log_file: Optional[str]) -> Settings:
    settings = Settings.from_env()
    if timeout is not None:
        settings.timeout = timeout
    if log_level:
        settings.log_level = log_level.upper()
    if log_file:
        settings.log_file = log_file
    configure_logging(settings.log_level, settings.log_file)
    return settings


def _unexpected():
    logger.exception("Unexpected error")
    print("[red]❌ Unexpected error occurred. Check logs for details.[/red]")
    raise typer.Exit(1)


@app.command()
def version():
    print(f"gitlog {__version__}")


@app.command()
def run(repo: str = typer.Option(None, help="Repository to report on first (prompted for when omitted)"),
        timeout: float = typer.Option(None, min=0.1, help="Seconds allowed per git invocation (default 10)"),
        yes: bool = typer.Option(False, "--yes", "-y", help="Save reports without asking"),
        banner: bool = typer.Option(True, help="Show the start-up banner"),
        log_level: str = typer.Option(None, help="DEBUG, INFO, WARNING or ERROR"),
        log_file: str = typer.Option(None, help="Application log file (rotated daily)")):
    """Interactive session (default command)."""
    try:
        settings = _settings(timeout, log_level, log_file)
        if yes:
            settings.confirm_save = False
        if banner:
            print_banner()
        Session(settings, repo=repo).run()
    except Exception:
        _unexpected()
    finally:
        logging.shutdown()


@app.command()
def report(repo: str = typer.Option(".", help="Path to a git repository"),
           timeout: float = typer.Option(None, min=0.1, help="Seconds allowed per git invocation (default 10)"),
           log_level: str = typer.Option(None, help="DEBUG, INFO, WARNING or ERROR"),
           log_file: str = typer.Option(None, help="Application log file (rotated daily)")):
    """Generate and save one report without prompting."""
    try:
        settings = _settings(timeout, log_level, log_file)
        path = validate_repository(repo)
        saved = write_report(asyncio.run(generate_report(path, timeout=settings.timeout, git=settings.git)))
    except GitLogError as e:
        print(f"[red]❌ {escape(str(e))}[/red]")
        raise typer.Exit(1)
    except Exception:
        _unexpected()
    finally:
        logging.shutdown()
    typer.echo(str(saved))


def main():
    # Default to the interactive 'run' command
    if len(sys.argv) == 1 or sys.argv[1] not in COMMANDS:
        sys.argv.insert(1, "run")
    app()


if __name__ == "__main__":
    main()
