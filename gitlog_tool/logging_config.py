from __future__ import annotations
import logging
from logging.handlers import TimedRotatingFileHandler
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

_HANDLER_ATTR = "_gitlog_handler"


def configure_logging(level: str = "INFO", log_file: Optional[str] = "ApplicationLog.txt",
                      console: Optional[Console] = None) -> logging.Logger:
    """Daily-rotated file log at ``level`` plus warnings and errors on stderr.

    Safe to call more than once: handlers installed by an earlier call are
    replaced rather than duplicated.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_ATTR, False):
            root.removeHandler(handler)
            handler.close()

    numeric = getattr(logging, level.upper(), logging.INFO)
    root.setLevel(numeric)

    console_handler = RichHandler(console=console or Console(stderr=True), show_path=False)
    console_handler.setLevel(max(numeric, logging.WARNING))
    setattr(console_handler, _HANDLER_ATTR, True)
    root.addHandler(console_handler)

    if log_file:
        try:
            file_handler = TimedRotatingFileHandler(log_file, when="midnight", encoding="utf-8")
        except OSError as e:
            root.warning(f"Cannot open log file {log_file}: {e.strerror or e}; logging to console only")
        else:
            file_handler.setLevel(numeric)
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
            setattr(file_handler, _HANDLER_ATTR, True)
            root.addHandler(file_handler)
    return root
