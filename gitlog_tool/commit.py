"""Latest-commit lookup and the filesystem-safe label derived from its subject."""

from __future__ import annotations
import logging
import re
from dataclasses import dataclass

from .tools.git_tools import GitClient

logger = logging.getLogger(__name__)

SEPARATOR = "_"
NO_MESSAGE = "NoMessage"
NO_COMMIT_MESSAGE = "NoCommitMessage"
MAX_SUBJECT_LENGTH = 50
ELLIPSIS = "..."

# Characters Windows refuses in file names. Used on every platform so that
# report names stay valid wherever the Logs folder ends up.
INVALID_FILENAME_CHARS = '"<>|:*?\\/' + "".join(chr(c) for c in range(32))


@dataclass(frozen=True)
class CommitDescriptor:
    hash: str
    sanitized_subject: str


def parse_commit_line(line: str) -> tuple[str, str]:
    """Split ``<hash>_<subject>`` on the first separator only.

    Without a separator the whole line is the hash and the subject is
    ``NoMessage``.
    """
    commit_hash, sep, subject = line.partition(SEPARATOR)
    if not sep:
        return commit_hash, NO_MESSAGE
    return commit_hash, subject


def sanitize_file_name(text: str, invalid_chars: str = INVALID_FILENAME_CHARS) -> str:
    text = text.strip()
    if not text:
        return NO_COMMIT_MESSAGE
    pattern = "[" + re.escape(invalid_chars + "&") + "]"
    return re.sub(pattern, "_", text).replace(" ", "-")


def truncate_subject(text: str, limit: int = MAX_SUBJECT_LENGTH) -> str:
    if len(text) > limit:
        return text[:limit] + ELLIPSIS
    return text


def describe_commit(line: str, invalid_chars: str = INVALID_FILENAME_CHARS) -> CommitDescriptor:
    commit_hash, subject = parse_commit_line(line)
    return CommitDescriptor(
        hash=commit_hash,
        sanitized_subject=truncate_subject(sanitize_file_name(subject, invalid_chars)),
    )


async def resolve_latest_commit(git: GitClient) -> CommitDescriptor:
    line = await git.latest_commit_line()
    descriptor = describe_commit(line)
    logger.info(f"Latest commit {descriptor.hash[:12]} -> '{descriptor.sanitized_subject}'")
    return descriptor
