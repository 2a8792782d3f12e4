from __future__ import annotations
import asyncio
import contextlib
import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from ..errors import ExternalToolFailure, ExternalToolTimeout

"""
Runner: run
Description: Execute one external command without a shell, bounded by a timeout.
Args: {"command": "git", "args": ["status", "--porcelain"], "timeout": 10, "cwd": "/path/to/repo"}
Returns: CommandResult with trimmed stdout. Raises ExternalToolTimeout / ExternalToolFailure.
"""

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
COMMAND_NOT_FOUND = 127


@dataclass(frozen=True)
class CommandResult:
    stdout: str
    exit_code: int = 0
    timed_out: bool = False
    stderr: str = ""


async def run(command: str, args: Sequence[str] = (), timeout: float = DEFAULT_TIMEOUT,
              cwd: Optional[str] = None, env: Optional[Mapping[str, str]] = None) -> CommandResult:
    args = list(args)
    logger.debug(f"exec: {command} {' '.join(args)} (cwd={cwd}, timeout={timeout:g}s)")
    try:
        process = await asyncio.create_subprocess_exec(
            command,
            *args,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=cwd,
            env=dict(env) if env is not None else None,
        )
    except FileNotFoundError as e:
        raise ExternalToolFailure(command, args, COMMAND_NOT_FOUND, str(e)) from e

    try:
        out, err = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(f"Timed out after {timeout:g}s, killing pid {process.pid}: {command} {' '.join(args)}")
        raise ExternalToolTimeout(command, args, timeout) from None
    finally:
        # Covers timeout and cancellation: never leave the child running.
        if process.returncode is None:
            with contextlib.suppress(ProcessLookupError):
                process.kill()
            await process.wait()

    stdout = _decode(out)
    stderr = _decode(err)
    if process.returncode != 0:
        logger.error(f"exit={process.returncode}: {command} {' '.join(args)}: {stderr.strip()}")
        raise ExternalToolFailure(command, args, process.returncode, stderr)
    return CommandResult(stdout=stdout.strip(), exit_code=process.returncode, stderr=stderr)


def child_env(**overrides: str) -> dict[str, str]:
    """Copy of the current environment with ``overrides`` applied."""
    env = os.environ.copy()
    env.update(overrides)
    return env


def _decode(data: Optional[bytes]) -> str:
    return (data or b"").decode("utf-8", errors="replace")
