"""Logging setup for the export tool: colour console output, optional log file, batch progress."""

import copy
import logging
import logging.handlers
import time
from typing import Any, Dict, Optional

import colorlog

LOGGER_NAME = 'gdocs_markdown'

DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEFAULT_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

LOG_LEVELS = {
    'DEBUG': logging.DEBUG,
    'INFO': logging.INFO,
    'WARNING': logging.WARNING,
    'ERROR': logging.ERROR,
    'CRITICAL': logging.CRITICAL,
}

LEVEL_COLORS = {
    'DEBUG': 'cyan',
    'INFO': 'green',
    'WARNING': 'yellow',
    'ERROR': 'red',
    'CRITICAL': 'red,bg_white',
}

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5


def resolve_log_level(verbosity: int = 0, level: Optional[str] = None) -> int:
    """
    Pick the log level from an explicit name or the ``-v`` count.

    Raises:
        ValueError: If ``level`` is not a standard level name
    """
    if level:
        try:
            return LOG_LEVELS[level.upper()]
        except KeyError:
            raise ValueError(
                f"Invalid log level '{level}'. Must be one of: {sorted(LOG_LEVELS)}"
            ) from None

    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def setup_logging(
    verbosity: int = 0,
    log_file: Optional[str] = None,
    log_format: Optional[str] = None,
    date_format: Optional[str] = None,
    level: Optional[str] = None
) -> logging.Logger:
    """
    Configure the ``gdocs_markdown`` logger.

    Calling it again replaces the handlers from the previous call, so the
    CLI can configure logging early and again once the config file is read.

    Args:
        verbosity: 0 for WARNING, 1 for INFO, 2 or more for DEBUG
        log_file: Also write records to this rotating file
        log_format: Record format, defaults to DEFAULT_LOG_FORMAT
        date_format: Timestamp format, defaults to DEFAULT_DATE_FORMAT
        level: Explicit level name, overrides ``verbosity``

    Returns:
        The configured package logger
    """
    log_level = resolve_log_level(verbosity, level)
    log_format = log_format or DEFAULT_LOG_FORMAT
    date_format = date_format or DEFAULT_DATE_FORMAT

    # Third-party loggers (urllib3) stay at WARNING on the root logger
    logging.basicConfig(level=logging.WARNING, format=log_format, datefmt=date_format)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level)
    logger.propagate = False
    logger.handlers.clear()

    console = logging.StreamHandler()
    console.setFormatter(colorlog.ColoredFormatter(
        fmt='%(log_color)s' + log_format,
        datefmt=date_format,
        log_colors=LEVEL_COLORS
    ))
    logger.addHandler(console)

    level_name = logging.getLevelName(log_level)
    if not log_file:
        logger.debug(f"Logging to console at {level_name}")
        return logger

    try:
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUPS,
            encoding='utf-8'
        )
    except OSError as e:
        logger.warning(f"Cannot open log file {log_file}: {str(e)}")
        return logger

    file_handler.setFormatter(logging.Formatter(fmt=log_format, datefmt=date_format))
    logger.addHandler(file_handler)
    logger.info(f"Logging to console and {log_file} at {level_name}")
    return logger


def format_elapsed(seconds: float) -> str:
    """Format a duration as ``12.3s``, ``2m 5s`` or ``1h 2m 5s``."""
    if seconds < 60:
        return f"{seconds:.1f}s"

    minutes, secs = divmod(int(seconds), 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}h {minutes}m {secs}s"
    return f"{minutes}m {secs}s"


class ProgressTracker:
    """Counts succeeded and failed items of a batch and logs a summary line on exit."""

    def __init__(self, total_items: int, item_type: str = "items"):
        self.total_items = total_items
        self.item_type = item_type
        self.succeeded = 0
        self.failed = 0
        self.started_at: Optional[float] = None
        self.logger = logging.getLogger(LOGGER_NAME)

    @property
    def processed(self) -> int:
        return self.succeeded + self.failed

    def __enter__(self) -> 'ProgressTracker':
        self.started_at = time.monotonic()
        self.logger.info(f"Processing {self.total_items} {self.item_type}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.started_at is None:
            return

        if self.failed and not self.succeeded:
            level = logging.ERROR
        elif self.failed:
            level = logging.WARNING
        else:
            level = logging.INFO

        self.logger.log(
            level,
            f"{self.processed}/{self.total_items} {self.item_type} processed: "
            f"{self.succeeded} succeeded, {self.failed} failed "
            f"in {format_elapsed(self.elapsed())}"
        )

    def increment(self, success: bool = True) -> None:
        if success:
            self.succeeded += 1
        else:
            self.failed += 1

    def elapsed(self) -> float:
        return 0.0 if self.started_at is None else time.monotonic() - self.started_at

    def get_stats(self) -> Dict[str, Any]:
        return {
            'total': self.total_items,
            'processed': self.processed,
            'succeeded': self.succeeded,
            'failed': self.failed,
            'elapsed_seconds': round(self.elapsed(), 3)
        }


def log_section(title: str) -> None:
    """Log a banner separating the phases of a run."""
    logger = logging.getLogger(LOGGER_NAME)
    rule = "=" * 60
    logger.info(rule)
    logger.info(f"  {title.upper()}")
    logger.info(rule)


SECRET_KEY_PARTS = ('secret', 'access_token', 'refresh_token', 'password', 'api_key')
REDACTED = "***REDACTED***"


def _sanitize_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of the config with non-empty secret strings replaced by REDACTED."""
    def redact(value: Any, key: str = '') -> Any:
        if isinstance(value, dict):
            return {k: redact(v, str(k)) for k, v in value.items()}
        if isinstance(value, list):
            return [redact(item) for item in value]
        if value and isinstance(value, str) and any(part in key.lower() for part in SECRET_KEY_PARTS):
            return REDACTED
        return value

    return redact(copy.deepcopy(config))


def log_config(config: Dict[str, Any]) -> None:
    """Log the effective configuration with credentials redacted."""
    logger = logging.getLogger(LOGGER_NAME)
    sanitized = _sanitize_config(config)

    log_section("Configuration")
    for section in ('google', 'fetch', 'export', 'advanced'):
        for key, value in sorted((sanitized.get(section) or {}).items()):
            logger.info(f"{section}.{key}: {'Not Set' if value in (None, '') else value}")


__all__ = [
    'format_elapsed',
    'log_config',
    'log_section',
    'ProgressTracker',
    'resolve_log_level',
    'setup_logging'
]
