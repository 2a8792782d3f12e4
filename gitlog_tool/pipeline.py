"""One report run: resolve the commit, collect changes, format.

A run moves IDLE -> RESOLVING_COMMIT -> COLLECTING_CHANGES -> FORMATTING and
ends in READY (with a Report) or FAILED (with the error). States are never
revisited; start a new ReportPipeline for another run.
"""

from __future__ import annotations
import logging
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Union

from .changes import collect_changes
from .commit import resolve_latest_commit
from .errors import GitLogError
from .report import Report, build_output_path, format_report
from .tools.git_tools import GitClient
from .tools.shell import DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)


class PipelineState(str, Enum):
    IDLE = "idle"
    RESOLVING_COMMIT = "resolving_commit"
    COLLECTING_CHANGES = "collecting_changes"
    FORMATTING = "formatting"
    READY = "ready"
    FAILED = "failed"


class ReportPipeline:
    def __init__(self, repo: Union[str, Path], git: Optional[GitClient] = None,
                 clock: Callable[[], datetime] = datetime.now):
        self.repo = Path(repo)
        self.git = git or GitClient(self.repo)
        self.clock = clock
        self.state = PipelineState.IDLE
        self.report: Optional[Report] = None
        self.error: Optional[GitLogError] = None

    def _enter(self, state: PipelineState) -> None:
        logger.debug(f"{self.repo}: {self.state.value} -> {state.value}")
        self.state = state

    async def run(self) -> Report:
        if self.state is not PipelineState.IDLE:
            raise RuntimeError(f"pipeline already used (state={self.state.value})")
        logger.info(f"Generating git log for {self.repo}")
        try:
            self._enter(PipelineState.RESOLVING_COMMIT)
            commit = await resolve_latest_commit(self.git)

            self._enter(PipelineState.COLLECTING_CHANGES)
            change_set = await collect_changes(self.git)

            self._enter(PipelineState.FORMATTING)
            content = format_report(change_set)
            path = build_output_path(self.repo, commit, self.clock())
        except GitLogError as e:
            self.error = e
            self._enter(PipelineState.FAILED)
            logger.error(f"Report run failed for {self.repo}: {e}")
            raise

        self.report = Report(file_path=path, content=content)
        self._enter(PipelineState.READY)
        return self.report


async def generate_report(repo: Union[str, Path], timeout: float = DEFAULT_TIMEOUT, git: str = "git",
                          clock: Callable[[], datetime] = datetime.now) -> Report:
    client = GitClient(repo, timeout=timeout, git=git)
    return await ReportPipeline(repo, git=client, clock=clock).run()
