from __future__ import annotations
import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass
class Settings:
    git: str = "git"
    timeout: float = 10.0  # seconds per git invocation
    log_file: str = "ApplicationLog.txt"
    log_level: str = "INFO"
    confirm_save: bool = True

    @classmethod
    def from_env(cls) -> "Settings":
        """Read GITLOG_* variables; call ``load_dotenv()`` first to honour a .env file."""
        defaults = cls()
        return cls(
            git=os.environ.get("GITLOG_GIT") or defaults.git,
            timeout=_float_env("GITLOG_TIMEOUT", defaults.timeout),
            log_file=os.environ.get("GITLOG_LOG_FILE") or defaults.log_file,
            log_level=(os.environ.get("GITLOG_LOG_LEVEL") or defaults.log_level).upper(),
            confirm_save=_bool_env("GITLOG_CONFIRM_SAVE", defaults.confirm_save),
        )


def _float_env(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Ignoring {name}={raw!r}: not a number, using {default:g}")
        return default
    if value <= 0:
        logger.warning(f"Ignoring {name}={raw!r}: must be positive, using {default:g}")
        return default
    return value


def _bool_env(name: str, default: bool) -> bool:
    raw = (os.environ.get(name) or "").strip().lower()
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    return default
