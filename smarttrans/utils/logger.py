"""
Unified logging for smarttrans.

Usage:
    from smarttrans.utils.logger import get_logger, setup_logging

    logger = get_logger(__name__)
    logger.info("Submitting batch", extra={"provider": "deepl", "batch_size": 3})

    # Structured JSON entries for operator diagnostics
    setup_logging(level="DEBUG", log_file="translate.log", json_format=True)
"""
import json
import logging
import sys
from pathlib import Path
from datetime import datetime
from typing import Optional, Literal

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

ROOT_LOGGER = "smarttrans"

# Color codes for terminal output
COLORS = {
    'DEBUG': '\033[36m',     # Cyan
    'INFO': '\033[32m',      # Green
    'WARNING': '\033[33m',   # Yellow
    'ERROR': '\033[31m',     # Red
    'CRITICAL': '\033[35m',  # Magenta
    'RESET': '\033[0m',
    'DIM': '\033[2m',
}

SUPPORTS_COLOR = hasattr(sys.stderr, 'isatty') and sys.stderr.isatty()

# Fields passed through `extra=` that belong in structured output
STRUCTURED_FIELDS = (
    "provider",
    "language",
    "target_code",
    "batch_size",
    "attempt",
    "delay",
    "status_code",
    "marker",
)


class ColoredFormatter(logging.Formatter):
    """Formatter with colored output for terminal."""

    def __init__(self, use_color: bool = True):
        super().__init__()
        self.use_color = use_color and SUPPORTS_COLOR

    def format(self, record: logging.LogRecord) -> str:
        if self.use_color:
            color = COLORS.get(record.levelname, COLORS['RESET'])
            reset = COLORS['RESET']
            dim = COLORS['DIM']
        else:
            color = reset = dim = ""

        name = record.name
        if name.startswith(ROOT_LOGGER + '.'):
            name = name[len(ROOT_LOGGER) + 1:]

        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        # Format: HH:MM:SS [LEVEL] module: message
        formatted = f"{dim}{timestamp}{reset} {color}[{record.levelname:7}]{reset} {name}: {record.getMessage()}"

        if record.exc_info:
            formatted += f"\n{self.formatException(record.exc_info)}"

        return formatted


class FileFormatter(logging.Formatter):
    """Formatter for file output (no colors, full timestamps)."""

    def __init__(self):
        super().__init__(
            fmt='%(asctime)s [%(levelname)-7s] %(name)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )


class JSONFormatter(logging.Formatter):
    """Formatter for JSON output (one structured entry per line)."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in STRUCTURED_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, ensure_ascii=False)


_configured = False
_log_level = logging.INFO


def setup_logging(
    level: LogLevel = "INFO",
    log_file: Optional[str] = None,
    json_format: bool = False,
    quiet: bool = False
) -> None:
    """
    Setup logging for the whole package.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path for log output
        json_format: Use JSON format for file output
        quiet: Suppress console output
    """
    global _configured, _log_level

    _log_level = getattr(logging, level.upper())

    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(_log_level)
    root.handlers.clear()

    if not quiet:
        console = logging.StreamHandler(sys.stderr)
        console.setLevel(_log_level)
        console.setFormatter(ColoredFormatter())
        root.addHandler(console)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)  # Always debug for file

        if json_format:
            file_handler.setFormatter(JSONFormatter())
        else:
            file_handler.setFormatter(FileFormatter())

        root.addHandler(file_handler)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger in the smarttrans namespace.

    Args:
        name: Logger name (usually __name__)

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Parsing started")
    """
    if not _configured:
        setup_logging()

    if not name.startswith(ROOT_LOGGER):
        if name.startswith('__'):
            name = ROOT_LOGGER
        else:
            name = f'{ROOT_LOGGER}.{name}'

    return logging.getLogger(name)


def set_level(level: LogLevel) -> None:
    """Change log level at runtime."""
    global _log_level
    _log_level = getattr(logging, level.upper())
    logging.getLogger(ROOT_LOGGER).setLevel(_log_level)


class log_level_context:
    """Temporarily change log level."""

    def __init__(self, level: LogLevel):
        self.level = level
        self.old_level = None

    def __enter__(self):
        self.old_level = _log_level
        set_level(self.level)
        return self

    def __exit__(self, *args):
        global _log_level
        if self.old_level is not None:
            _log_level = self.old_level
            logging.getLogger(ROOT_LOGGER).setLevel(self.old_level)
