"""
Logging Configuration

Centralized logging setup with configurable levels, optional file rotation
and structured logging for the benchmark harness.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional
import json
from datetime import datetime, timezone


class JSONFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_entry = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        # Add extra fields if present
        if hasattr(record, 'action'):
            log_entry['action'] = record.action
        if hasattr(record, 'build_id'):
            log_entry['build_id'] = record.build_id

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_entry)


class ActionLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that adds action context to log records."""

    def process(self, msg: str, kwargs: dict) -> tuple:
        """Add extra context to log record."""
        extra = kwargs.get('extra', {})
        extra.update(self.extra)
        kwargs['extra'] = extra
        return msg, kwargs


def setup_logging(config=None, console_level: Optional[str] = None) -> None:
    """
    Set up logging configuration for the application.

    Args:
        config: Optional LoggingConfig (defaults apply if None)
        console_level: Override for the console handler level
    """
    if config is None:
        from clientbench.core.config import LoggingConfig
        config = LoggingConfig()

    level = getattr(logging, config.level.upper(), logging.INFO)
    console_level_name = (console_level or config.console_level).upper()
    console_numeric_level = getattr(logging, console_level_name, logging.WARNING)

    root_logger = logging.getLogger()
    root_logger.setLevel(min(level, console_numeric_level))

    # Clear any existing handlers
    root_logger.handlers.clear()

    # stdout carries benchmark output, so the console handler uses stderr
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_numeric_level)

    if config.json:
        formatter = JSONFormatter()
        console_handler.setFormatter(formatter)
    else:
        console_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        ))
    root_logger.addHandler(console_handler)

    if config.file:
        log_file = Path(config.file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            filename=log_file,
            maxBytes=_parse_size(config.max_size),
            backupCount=config.backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(level)
        if config.json:
            file_handler.setFormatter(JSONFormatter())
        else:
            file_handler.setFormatter(logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(funcName)s:%(lineno)d - %(message)s'
            ))
        root_logger.addHandler(file_handler)

    _configure_third_party_loggers()

    logger = logging.getLogger(__name__)
    logger.info(f"Logging configured - Console: {console_level_name}, File: {config.level}, "
                f"Path: {config.file or 'disabled'}")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)


def get_action_logger(action: str, build_id: Optional[str] = None) -> ActionLoggerAdapter:
    """
    Get a logger adapter with action context.

    Args:
        action: Name of the benchmark action
        build_id: Optional build identity for context

    Returns:
        Logger adapter with action context
    """
    logger = get_logger('clientbench.action')
    extra = {'action': action}

    if build_id:
        extra['build_id'] = build_id

    return ActionLoggerAdapter(logger, extra)


def _parse_size(size_str: str) -> int:
    """
    Parse size string (e.g., '10MB') to bytes.

    Args:
        size_str: Size string like '10MB', '1GB', etc.

    Returns:
        Size in bytes
    """
    size_str = size_str.upper().strip()

    # Longest suffixes first so 'MB' is not read as 'B'
    multipliers = {
        'GB': 1024 ** 3,
        'MB': 1024 ** 2,
        'KB': 1024,
        'B': 1,
    }

    for unit, multiplier in multipliers.items():
        if size_str.endswith(unit):
            number_str = size_str[:-len(unit)].strip()
            try:
                number = float(number_str)
                return int(number * multiplier)
            except ValueError:
                break

    # Default to 10MB if parsing fails
    return 10 * 1024 * 1024


def _configure_third_party_loggers() -> None:
    """Configure third-party library loggers."""
    logging.getLogger('aiohttp').setLevel(logging.WARNING)
    logging.getLogger('asyncio').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)


class PerformanceTimer:
    """Context manager for timing operations."""

    def __init__(self, operation: str, logger=None):
        """
        Initialize performance timer.

        Args:
            operation: Description of the operation being timed
            logger: Logger (or adapter) instance to use
        """
        self.operation = operation
        self.logger = logger or get_logger(__name__)
        self.start_time = None

    def __enter__(self):
        """Start timing."""
        self.start_time = datetime.now()
        self.logger.debug(f"Started {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """End timing and log duration."""
        end_time = datetime.now()
        duration = (end_time - self.start_time).total_seconds()

        if exc_type is None:
            self.logger.info(f"Completed {self.operation} in {duration:.3f}s")
        else:
            self.logger.error(f"Failed {self.operation} after {duration:.3f}s: {exc_val}")
