"""Report text and the file it is saved to."""

from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Union

from .changes import ChangeSet
from .commit import CommitDescriptor
from .errors import FilesystemError

logger = logging.getLogger(__name__)

LOGS_DIR_NAME = "Logs"
FILE_PREFIX = "GitLog"
TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"

STAGED_CHANGES = "Staged Changes"
STAGED_MODIFIED = "Staged Modified Files"
UNSTAGED_CHANGES = "Unstaged Changes"
UNSTAGED_MODIFIED = "Unstaged Modified Files"

NO_STAGED_CHANGES = "No staged changes."
NO_STAGED_MODIFICATIONS = "No staged modifications."
NO_UNSTAGED_CHANGES = "No unstaged changes."
NO_UNSTAGED_MODIFICATIONS = "No unstaged modifications."


@dataclass(frozen=True)
class Report:
    file_path: Path
    content: str


def _body(text: str, fallback: str) -> str:
    return text if text.strip() else fallback


def format_report(change_set: ChangeSet) -> str:
    sections = [
        (STAGED_CHANGES, _body("\n".join(change_set.staged_lines), NO_STAGED_CHANGES)),
        (STAGED_MODIFIED, _body(change_set.staged_diff_summary, NO_STAGED_MODIFICATIONS)),
        (UNSTAGED_CHANGES, _body("\n".join(change_set.unstaged_lines), NO_UNSTAGED_CHANGES)),
        (UNSTAGED_MODIFIED, _body(change_set.unstaged_diff_summary, NO_UNSTAGED_MODIFICATIONS)),
    ]
    return "\n".join(f"=== {title} ===\n{body}\n" for title, body in sections)


def build_output_path(repo: Union[str, Path], commit: CommitDescriptor, now: datetime) -> Path:
    logs_dir = Path(repo) / LOGS_DIR_NAME
    try:
        logs_dir.mkdir(exist_ok=True)
    except OSError as e:
        raise FilesystemError(logs_dir, e) from e
    name = f"{FILE_PREFIX}_{now.strftime(TIMESTAMP_FORMAT)}_{commit.hash}_{commit.sanitized_subject}.txt"
    return logs_dir / name


def write_report(report: Report) -> Path:
    """Write the report in one piece: a temp sibling, then an atomic rename."""
    tmp_path = report.file_path.with_name(report.file_path.name + ".tmp")
    try:
        with open(tmp_path, "w", encoding="utf-8", newline="\n") as f:
            f.write(report.content)
        os.replace(tmp_path, report.file_path)
    except OSError as e:
        try:
            tmp_path.unlink()
        except OSError:
            pass
        raise FilesystemError(report.file_path, e) from e
    logger.info(f"Report saved to {report.file_path}")
    return report.file_path
