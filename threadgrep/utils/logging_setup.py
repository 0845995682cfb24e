"""
Logging configuration for threadgrep.

Provides environment-aware logging that:
- Uses stderr exclusively so search results on stdout stay clean
- Outputs JSON in container environments
- Provides human-readable output for interactive use
- Includes custom TRACE level for detailed debugging
"""

import sys
import logging
import json
import os
from datetime import datetime, timezone
from typing import Optional, Any, TextIO

# Define TRACE level (lower number = more detailed)
TRACE_LEVEL = 5
logging.addLevelName(TRACE_LEVEL, "TRACE")

DEFAULT_LOG_LEVEL = 'WARNING'


def trace(self, message, *args, **kwargs):
    if self.isEnabledFor(TRACE_LEVEL):
        self._log(TRACE_LEVEL, message, args, **kwargs)


logging.Logger.trace = trace


def add_trace_to_logger():
    """Ensure trace method is available on all logger instances"""
    if not hasattr(logging.Logger, 'trace'):
        logging.Logger.trace = trace


class ContainerFormatter(logging.Formatter):
    """JSON formatter optimized for container logs"""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON for container environments"""
        log_data = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'component': record.name,
            'thread': record.threadName,
            'message': record.getMessage(),
            'pid': os.getpid(),
        }

        # Add any extra fields
        if hasattr(record, 'extra'):
            log_data.update(record.extra)

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def in_container() -> bool:
    """Detect whether we are running inside a container"""
    return (
        os.path.exists('/.dockerenv') or
        os.environ.get('DOCKER_CONTAINER', '').lower() == 'true'
    )


def resolve_level(level_str: Optional[str]) -> int:
    """Convert a level name (including TRACE) to its numeric value"""
    level_str = (level_str or DEFAULT_LOG_LEVEL).upper()
    if level_str == 'TRACE':
        return TRACE_LEVEL
    return getattr(logging, level_str, logging.WARNING)


def configure_logging(
    log_level: Optional[str] = None,
    stream: Optional[TextIO] = None,
    json_output: Optional[bool] = None,
) -> None:
    """
    Configure logging based on environment.

    Args:
        log_level: Override log level (defaults to THREADGREP_LOG_LEVEL, then
            LOG_LEVEL, then WARNING)
        stream: Stream for the handler (defaults to stderr)
        json_output: Force JSON formatting on or off (defaults to container detection)
    """
    add_trace_to_logger()
    # THREADGREP_LOG_LEVEL takes precedence over LOG_LEVEL
    level_str = (
        log_level
        or os.environ.get('THREADGREP_LOG_LEVEL')
        or os.environ.get('LOG_LEVEL', DEFAULT_LOG_LEVEL)
    )
    level = resolve_level(level_str)

    # Clear any existing handlers
    root_logger = logging.getLogger()
    root_logger.handlers = []

    if json_output is None:
        json_output = in_container()

    handler = logging.StreamHandler(stream or sys.stderr)
    if json_output:
        handler.setFormatter(ContainerFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            '%(levelname)s: [%(threadName)s] %(name)s: %(message)s'
        ))

    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    logger = logging.getLogger('threadgrep')
    logger.debug(f"Logging configured - Level: {level_str.upper()}, JSON: {json_output}")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the given name.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured logger instance
    """
    add_trace_to_logger()
    return logging.getLogger(name)


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **context: Any
) -> None:
    """
    Log a message with additional context fields.

    Args:
        logger: Logger instance
        level: Log level (e.g., logging.INFO)
        message: Log message
        **context: Additional fields to include in structured logs
    """
    extra = {'extra': context} if context else {}
    logger.log(level, message, extra=extra)
