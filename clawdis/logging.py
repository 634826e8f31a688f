"""
Logging setup for the Clawdis debug panel.

Console output goes to stderr so command results printed on stdout stay
pipeable. File output can follow the gateway's rolling log naming
(``/tmp/clawdis/clawdis-YYYY-MM-DD.log``) so panel and gateway entries land
side by side.
"""

import logging
import sys
from pathlib import Path
from types import TracebackType
from typing import Optional, Union

from clawdis.paths import rolling_log_path

NAMESPACE = "clawdis"

CONSOLE_FORMAT = "%(levelname)s %(message)s"
VERBOSE_CONSOLE_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)-7s [panel] %(name)s:%(lineno)d %(message)s"

# Loggers that flood DEBUG output while the TUI is running
QUIET_LOGGERS = ("asyncio", "textual")


def setup_logging(
    level: str = "INFO",
    log_file: Union[str, Path, None] = None,
) -> Optional[Path]:
    """
    Configure the ``clawdis`` logger tree.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: File to append to. An empty string selects today's
            rolling log. ``None`` disables file output.

    Returns:
        The log file in use, or None.
    """
    numeric_level = getattr(logging, str(level).upper(), logging.INFO)

    root_logger = logging.getLogger(NAMESPACE)
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    if numeric_level <= logging.DEBUG:
        console_handler.setFormatter(logging.Formatter(VERBOSE_CONSOLE_FORMAT, datefmt="%H:%M:%S"))
    else:
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    root_logger.addHandler(console_handler)

    target: Optional[Path] = None
    if log_file is not None:
        target = Path(log_file).expanduser() if str(log_file) else rolling_log_path()
        target.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(target, encoding="utf-8")
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        root_logger.addHandler(file_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return target


def get_logger(name: str) -> logging.Logger:
    """Return ``name`` under the ``clawdis`` namespace."""
    if not name.startswith(NAMESPACE):
        name = f"{NAMESPACE}.{name}"
    return logging.getLogger(name)


def format_exception_summary(error: BaseException, *, max_length: int = 180) -> str:
    """One-line ``ExcType: message`` with whitespace collapsed, cut at ``max_length``."""
    detail = " ".join(str(error).split())
    summary = f"{type(error).__name__}: {detail}" if detail else type(error).__name__
    if max_length > 3 and len(summary) > max_length:
        summary = summary[: max_length - 3].rstrip() + "..."
    return summary


def exception_exc_info(
    error: BaseException,
) -> tuple[type[BaseException], BaseException, Optional[TracebackType]]:
    return (type(error), error, error.__traceback__)


def configure_logging_from_args(
    verbose: bool = False,
    log_level: Optional[str] = None,
    log_file: Union[str, Path, None] = None,
) -> Optional[Path]:
    """Map ``-v`` / ``--log-level`` / ``--log-file`` onto ``setup_logging``."""
    level = (log_level or ("DEBUG" if verbose else "INFO")).upper()
    return setup_logging(level=level, log_file=log_file)
