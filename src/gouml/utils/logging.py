"""Log output for the gouml CLI and uploader.

Three modes, selected from the global CLI flags:
- human:   [LEVEL] message
- verbose: [LEVEL][HH:MM:SS] message
- json:    {"level":"...","ts":"...","logger":"...","msg":"...", ...}

Everything goes to stderr so that `gouml generate` can stream the model on
stdout. The analyzers never log; only the CLI and uploader do.
"""

import json
import logging
import sys
from datetime import UTC, datetime
from enum import Enum
from typing import Any, TextIO

LOGGER_NAME = "gouml"

_RESET = "\033[0m"
_LEVEL_COLORS = {
    logging.DEBUG: "\033[90m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[31m",
}


class LogMode(Enum):
    """Logging output mode."""

    HUMAN = "human"
    VERBOSE = "verbose"
    JSON = "json"


class TextFormatter(logging.Formatter):
    """Single-line text format, optionally with a clock time and ANSI colors."""

    def __init__(self, timestamps: bool = False, use_colors: bool = False) -> None:
        super().__init__()
        self.timestamps = timestamps
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        tag = f"[{record.levelname}]"
        if self.use_colors:
            tag = f"{_LEVEL_COLORS.get(record.levelno, _RESET)}{tag}{_RESET}"
        if self.timestamps:
            tag += datetime.fromtimestamp(record.created).strftime("[%H:%M:%S]")
        return f"{tag} {record.getMessage()}"


class JSONFormatter(logging.Formatter):
    """JSON lines for CI logs; structured extras are merged into the object."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "level": record.levelname,
            "ts": datetime.fromtimestamp(record.created, UTC).strftime("%Y-%m-%dT%H:%M:%SZ"),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        entry.update(getattr(record, "extra_data", {}))
        return json.dumps(entry)


class GoumlLogger(logging.Logger):
    """Logger with a helper for attaching structured fields."""

    def structured(self, level: int, msg: str, **fields: Any) -> None:
        """Log ``msg`` with ``fields``; only the JSON mode renders the fields."""
        self.log(level, msg, extra={"extra_data": fields}, stacklevel=2)


logging.setLoggerClass(GoumlLogger)


def get_logger(name: str = LOGGER_NAME) -> GoumlLogger:
    """Return the gouml logger, or a child of it for a module name."""
    return logging.getLogger(name)  # type: ignore[return-value]


def setup_logging(
    mode: LogMode = LogMode.HUMAN,
    level: int = logging.INFO,
    stream: TextIO | None = None,
) -> None:
    """Install a single handler on the gouml logger.

    Args:
        mode: Output mode
        level: Minimum level
        stream: Target stream (default: stderr)
    """
    target = stream or sys.stderr
    use_colors = bool(getattr(target, "isatty", None) and target.isatty())

    formatter: logging.Formatter
    if mode == LogMode.JSON:
        formatter = JSONFormatter()
    else:
        formatter = TextFormatter(timestamps=mode == LogMode.VERBOSE, use_colors=use_colors)

    handler = logging.StreamHandler(target)
    handler.setFormatter(formatter)

    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False


def configure_from_cli(verbose: bool = False, quiet: bool = False, ci: bool = False) -> None:
    """Map the global --verbose, --quiet and --ci flags onto setup_logging().

    --ci wins over --verbose for the format; --quiet wins over --verbose for
    the level.
    """
    mode = LogMode.JSON if ci else LogMode.VERBOSE if verbose else LogMode.HUMAN
    level = logging.WARNING if quiet else logging.DEBUG if verbose else logging.INFO
    setup_logging(mode=mode, level=level)
