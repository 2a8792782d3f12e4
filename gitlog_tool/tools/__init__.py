from __future__ import annotations
from .shell import CommandResult, DEFAULT_TIMEOUT, run
from .git_tools import GitClient

__all__ = ["CommandResult", "DEFAULT_TIMEOUT", "GitClient", "run"]
