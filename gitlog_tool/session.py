"""Interactive session: ask for a repository, run the report, preview, save, repeat."""

from __future__ import annotations
import asyncio
import logging
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from .config import Settings
from .errors import GitLogError, InvalidRepository
from .pipeline import ReportPipeline
from .report import Report, write_report
from .tools.git_tools import GitClient

logger = logging.getLogger(__name__)

EXIT_WORD = "exit"

MENU = [
    ("open", "📂 Open the generated log file"),
    ("again", "🔁 Generate again for this repository"),
    ("switch", "📁 Select another Git repository"),
    ("exit", "❌ Exit"),
]


class SessionState(str, Enum):
    PROMPTING_PATH = "prompting_path"
    RUNNING = "running"
    PREVIEWING = "previewing"
    DONE = "done"


def validate_repository(path: str) -> Path:
    if not path or not path.strip():
        raise InvalidRepository(path, "Invalid path. Please enter a valid directory.")
    repo = Path(path.strip()).expanduser()
    if not repo.is_dir():
        raise InvalidRepository(path, "Invalid path. Please enter a valid directory.")
    # .git may be a file for worktrees and submodules
    if not (repo / ".git").exists():
        raise InvalidRepository(path, "No Git repository found in the specified directory.")
    logger.info(f"Valid Git repository found at {repo}")
    return repo


class Session:
    def __init__(self, settings: Optional[Settings] = None, console: Optional[Console] = None,
                 ask: Optional[Callable[[str], str]] = None,
                 launcher: Callable[[str], int] = typer.launch,
                 repo: Optional[str] = None):
        self.settings = settings or Settings()
        self.console = console or Console()
        self.ask = ask or self.console.input
        self.launcher = launcher
        self.state = SessionState.PROMPTING_PATH
        self.repo: Optional[Path] = None
        self.report: Optional[Report] = None
        self.saved_path: Optional[Path] = None
        self._initial_repo = repo

    def run(self) -> None:
        handlers = {
            SessionState.PROMPTING_PATH: self._prompt_path,
            SessionState.RUNNING: self._run_report,
            SessionState.PREVIEWING: self._preview,
        }
        try:
            while self.state is not SessionState.DONE:
                self.state = handlers[self.state]()
        except (EOFError, KeyboardInterrupt):
            self.console.print()
            self.state = SessionState.DONE
        self.console.print("[cyan]👋 Goodbye![/cyan]")

    # ---------- States ----------
    def _prompt_path(self) -> SessionState:
        if self._initial_repo is not None:
            path, self._initial_repo = self._initial_repo, None
        else:
            path = self.ask("📂 [yellow]Enter the path to a Git repository[/yellow] (or type 'exit' to quit): ")
        if path.strip().lower() == EXIT_WORD:
            return SessionState.DONE
        try:
            self.repo = validate_repository(path)
        except InvalidRepository as e:
            self.console.print(f"[yellow]⚠ {e.reason}[/yellow]")
            return SessionState.PROMPTING_PATH
        return SessionState.RUNNING

    def _run_report(self) -> SessionState:
        if self.repo is None:
            raise RuntimeError("no repository selected")
        self.report = None
        self.saved_path = None
        pipeline = ReportPipeline(
            self.repo,
            git=GitClient(self.repo, timeout=self.settings.timeout, git=self.settings.git),
        )
        try:
            with self.console.status("Fetching Git data...", spinner="dots"):
                self.report = asyncio.run(pipeline.run())
        except GitLogError as e:
            self.console.print(f"[red]❌ Could not generate the git log:[/red] {escape(str(e))}")
            answer = self.ask("Retry? (y/N) ").strip().lower()
            return SessionState.RUNNING if answer in ("y", "yes") else SessionState.PROMPTING_PATH
        return SessionState.PREVIEWING

    def _preview(self) -> SessionState:
        report = self.report
        if report is None:
            raise RuntimeError("no report to preview")
        self.console.print(Panel(Text(report.content), title=report.file_path.name, border_style="dim"))

        if not self.settings.confirm_save or self._confirm("Save this report? (Y/n) "):
            try:
                self.saved_path = write_report(report)
            except GitLogError as e:
                self.console.print(f"[red]❌ Could not save the report:[/red] {escape(str(e))}")
            else:
                self.console.print("\n[green]✔ Git log generated successfully![/green]")
                self.console.print(f"[blue]Saved to:[/blue] {escape(str(self.saved_path))}")
        else:
            logger.info(f"Report for {self.repo} discarded")
            self.console.print("[grey50]Report discarded.[/grey50]")

        while True:
            choice = self._menu()
            if choice == "open":
                self._open(self.saved_path)
                continue
            if choice == "again":
                return SessionState.RUNNING
            if choice == "switch":
                return SessionState.PROMPTING_PATH
            return SessionState.DONE

    # ---------- Helpers ----------
    def _confirm(self, prompt: str) -> bool:
        return self.ask(prompt).strip().lower() not in ("n", "no")

    def _menu(self) -> str:
        options = [(key, label) for key, label in MENU if key != "open" or self.saved_path is not None]
        self.console.print("\nWhat do you want to do next?")
        for i, (_, label) in enumerate(options, 1):
            self.console.print(f"  [bold]{i}[/bold]. {label}")
        while True:
            raw = self.ask("Choice: ").strip()
            if raw.isdigit() and 1 <= int(raw) <= len(options):
                return options[int(raw) - 1][0]
            self.console.print(f"[yellow]⚠ Enter a number between 1 and {len(options)}.[/yellow]")

    def _open(self, path: Optional[Path]) -> None:
        try:
            self.launcher(str(path))
        except Exception as e:
            logger.warning(f"Could not open {path}: {e}")
            self.console.print("[yellow]⚠ Could not open the file.[/yellow]")
