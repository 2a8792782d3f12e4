from __future__ import annotations
import logging
from pathlib import Path
from typing import Awaitable, Callable, Optional, Sequence, Union

from .shell import DEFAULT_TIMEOUT, CommandResult, child_env, run

"""
Git: latest_commit_line
Description: Hash and subject of HEAD as one line, "<hash>_<subject>".

Git: status
Description: Working tree status in porcelain (stable, machine-readable) short form.

Git: staged_diff / unstaged_diff
Description: Name-and-status diff of the index against HEAD / of the working tree against the index.
"""

logger = logging.getLogger(__name__)

Runner = Callable[..., Awaitable[CommandResult]]

LATEST_COMMIT_ARGS = ("log", "-1", "--no-color", "--pretty=format:%H_%s")
STATUS_ARGS = ("status", "--porcelain")
STAGED_DIFF_ARGS = ("diff", "--no-color", "--cached", "--name-status")
UNSTAGED_DIFF_ARGS = ("diff", "--no-color", "--name-status")


class GitClient:
    """Runs git against one repository, always passing it as the child's cwd."""

    def __init__(self, repo: Union[str, Path], runner: Optional[Runner] = None,
                 timeout: float = DEFAULT_TIMEOUT, git: str = "git"):
        self.repo = Path(repo)
        self.runner: Runner = runner or run
        self.timeout = timeout
        self.git = git
        # Read-only queries: don't take index.lock, never prompt for credentials.
        self._env = child_env(GIT_OPTIONAL_LOCKS="0", GIT_TERMINAL_PROMPT="0")

    async def _git(self, args: Sequence[str]) -> str:
        result = await self.runner(self.git, list(args), timeout=self.timeout,
                                   cwd=str(self.repo), env=self._env)
        return result.stdout

    async def latest_commit_line(self) -> str:
        return await self._git(LATEST_COMMIT_ARGS)

    async def status(self) -> str:
        return await self._git(STATUS_ARGS)

    async def staged_diff(self) -> str:
        return await self._git(STAGED_DIFF_ARGS)

    async def unstaged_diff(self) -> str:
        return await self._git(UNSTAGED_DIFF_ARGS)
