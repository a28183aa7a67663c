"""
Structured JSON Logging Configuration for dtresolve

Provides consistent, parseable logging for the CLI and for applications
embedding the resolver. Logs can be viewed with jq for easy filtering.
"""
import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

# Attributes every LogRecord carries; anything else came in through extra={}
_STANDARD_ATTRS = {
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'message', 'pathname', 'process', 'processName', 'relativeCreated',
    'thread', 'threadName', 'exc_info', 'exc_text', 'stack_info',
    'taskName', 'extra_data', 'getMessage'
}


class JSONFormatter(logging.Formatter):
    """
    Custom JSON formatter for structured logging.

    Outputs logs as single-line JSON objects that are:
    - Machine-parseable
    - Human-readable with jq
    - Consistent across environments
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: Dict[str, Any] = {
            'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        if hasattr(record, 'extra_data'):
            log_data.update(record.extra_data)

        # Include fields passed via extra={}
        for attr_name, attr_value in record.__dict__.items():
            if attr_name not in _STANDARD_ATTRS and attr_name not in log_data:
                # Only include serializable types
                if isinstance(attr_value, (str, int, float, bool, type(None), dict, list)):
                    log_data[attr_name] = attr_value

        return json.dumps(log_data, ensure_ascii=False)


class PrettyJSONFormatter(logging.Formatter):
    """
    Colored single-line formatter for development.

    Keeps the same fields as JSONFormatter but reads better in a terminal.
    """

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
        'RESET': '\033[0m',       # Reset
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as a readable line."""
        timestamp = datetime.now(timezone.utc).strftime('%H:%M:%S.%f')[:-3]
        color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
        reset = self.COLORS['RESET']

        parts = [
            f"{color}[{record.levelname}]{reset}",
            timestamp,
            f"{record.name}:",
            record.getMessage(),
        ]

        extra_parts = [
            f"{key}={value}"
            for key, value in record.__dict__.items()
            if key not in _STANDARD_ATTRS and value is not None
        ]
        if extra_parts:
            parts.append(f"({', '.join(extra_parts)})")

        result = ' '.join(parts)

        if record.exc_info:
            result += '\n' + self.formatException(record.exc_info)

        return result


def setup_logging(
    app_name: str = 'dtresolve',
    log_level: str = 'INFO',
    log_format: str = 'json',
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Configure structured logging for the package.

    Args:
        app_name: Name of the logger to configure (the package logger by
            default, so every dtresolve module inherits it)
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Format type ('json' or 'pretty')
        log_file: Optional file path for file-based logging

    Returns:
        Configured logger instance

    Example:
        >>> logger = setup_logging('dtresolve', 'DEBUG', 'pretty')
        >>> logger.debug('Resolved', extra={'time_zone': 'UTC'})
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    logger = logging.getLogger(app_name)
    logger.setLevel(numeric_level)
    logger.handlers = []  # Clear any existing handlers

    if log_format == 'pretty':
        formatter = PrettyJSONFormatter()
    else:
        formatter = JSONFormatter()

    # Console handler (stderr, stdout carries resolved values)
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        try:
            log_dir = os.path.dirname(log_file)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)

            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(numeric_level)
            # Always use JSON for file logs
            file_handler.setFormatter(JSONFormatter())
            logger.addHandler(file_handler)
        except OSError as e:
            logger.warning(f"Failed to setup file logging: {e}")

    # Don't propagate to root logger
    logger.propagate = False

    return logger
