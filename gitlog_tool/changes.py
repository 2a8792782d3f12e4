"""Working tree status and diff summaries for one repository."""

from __future__ import annotations
import asyncio
import logging
from dataclasses import dataclass
from typing import Iterable

from .tools.git_tools import GitClient

logger = logging.getLogger(__name__)

UNTRACKED_MARKER = "??"


def split_status_lines(output: str) -> tuple[str, ...]:
    return tuple(line for line in output.split("\n") if line)


def partition_status_lines(lines: Iterable[str]) -> tuple[list[str], list[str]]:
    """Return ``(staged, unstaged)``.

    A line is unstaged exactly when it starts with ``??``; everything else is
    counted as staged. Renames, conflicts and files changed in both the index
    and the working tree all land in the staged bucket.
    """
    staged: list[str] = []
    unstaged: list[str] = []
    for line in lines:
        (unstaged if line.startswith(UNTRACKED_MARKER) else staged).append(line)
    return staged, unstaged


@dataclass(frozen=True)
class ChangeSet:
    status_lines: tuple[str, ...]
    staged_diff_summary: str
    unstaged_diff_summary: str

    @property
    def staged_lines(self) -> list[str]:
        return partition_status_lines(self.status_lines)[0]

    @property
    def unstaged_lines(self) -> list[str]:
        return partition_status_lines(self.status_lines)[1]


async def collect_changes(git: GitClient) -> ChangeSet:
    tasks = [
        asyncio.ensure_future(git.status()),
        asyncio.ensure_future(git.staged_diff()),
        asyncio.ensure_future(git.unstaged_diff()),
    ]
    try:
        status, staged_diff, unstaged_diff = await asyncio.gather(*tasks)
    except BaseException:
        # One query failed: stop the others so their children get reaped.
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise

    change_set = ChangeSet(
        status_lines=split_status_lines(status),
        staged_diff_summary=staged_diff,
        unstaged_diff_summary=unstaged_diff,
    )
    logger.info(f"Collected {len(change_set.status_lines)} status lines "
                f"({len(change_set.unstaged_lines)} untracked)")
    return change_set
