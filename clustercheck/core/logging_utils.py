"""Logging setup (coloured per-level console output) and structured verdict logging."""

import logging
import sys
from typing import Optional

from clustercheck.core.verdict import Verdict

logger = logging.getLogger(__name__)

# ANSI color codes
_RESET = "\033[0m"
_BOLD = "\033[1m"
_GRAY = "\033[90m"
_YELLOW = "\033[33m"
_RED = "\033[31m"
_CYAN = "\033[36m"

_LEVEL_COLORS = {
    logging.DEBUG: _GRAY,
    logging.INFO: _CYAN,
    logging.WARNING: _YELLOW,
    logging.ERROR: _RED + _BOLD,
    logging.CRITICAL: _RED + _BOLD,
}

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


class ColoredFormatter(logging.Formatter):
    """Formatter that adds colors per log level."""

    def format(self, record: logging.LogRecord) -> str:
        color = _LEVEL_COLORS.get(record.levelno, _RESET)
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{color}[{record.levelname}]{_RESET}"
        return super().format(record)


def setup_logging(debug: bool = False, color: Optional[bool] = None) -> None:
    """Configure root logging on stdout. Color defaults to on when stdout is a TTY."""
    if color is None:
        color = sys.stdout.isatty()
    handler = logging.StreamHandler(sys.stdout)
    formatter_cls = ColoredFormatter if color else logging.Formatter
    handler.setFormatter(formatter_cls(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT))
    logging.root.handlers.clear()
    logging.root.addHandler(handler)
    logging.root.setLevel(logging.DEBUG if debug else logging.INFO)
    if not debug:
        logging.getLogger("asyncio").setLevel(logging.WARNING)


def log_verdict_transition(previous: Verdict, current: Verdict, extra: Optional[dict] = None) -> None:
    """Log a verdict change: human line plus key=value fields at debug."""
    logger.info('Status changed! Now "%s", Was "%s"', current.comment, previous.comment)
    extra = dict(extra or {})
    extra["available"] = current.available
    extra["reason"] = current.reason.value
    extra["was_available"] = previous.available
    extra["was_reason"] = previous.reason.value
    logger.debug("verdict_transition " + " ".join(f"{k}={v}" for k, v in sorted(extra.items())))
