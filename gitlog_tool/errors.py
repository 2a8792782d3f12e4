"""Error types raised by the report pipeline and the session around it."""

from __future__ import annotations
from pathlib import Path
from typing import Sequence


class GitLogError(Exception):
    """Base class for every failure scoped to a single report run."""


class InvalidRepository(GitLogError):
    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(reason)


class ExternalToolTimeout(GitLogError):
    def __init__(self, command: str, args: Sequence[str], timeout: float):
        self.command = command
        self.arguments = tuple(args)
        self.timeout = timeout
        super().__init__(f"Command timed out after {timeout:g}s: {_describe(command, args)}")


class ExternalToolFailure(GitLogError):
    def __init__(self, command: str, args: Sequence[str], exit_code: int, stderr: str = ""):
        self.command = command
        self.arguments = tuple(args)
        self.exit_code = exit_code
        self.stderr = stderr
        detail = stderr.strip() or "no error output"
        super().__init__(f"Command failed (exit={exit_code}): {_describe(command, args)}: {detail}")


class FilesystemError(GitLogError):
    def __init__(self, path: Path, cause: OSError):
        self.path = path
        self.cause = cause
        super().__init__(f"Filesystem error at {path}: {cause.strerror or cause}")


def _describe(command: str, args: Sequence[str]) -> str:
    return " ".join([command, *args])
