"""Structured logging for the server.

Every handler writes to stderr or a file; in stdio mode stdout is the MCP
stream and must carry nothing else.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

PLAIN_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
MAX_LOGGED_QUERY = 500


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Args:
            record: Log record to format

        Returns:
            JSON formatted log string
        """
        log_obj = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
            # Handlers run in worker threads, one per request
            'thread': record.threadName
        }

        if record.exc_info:
            log_obj['exception'] = self.formatException(record.exc_info)

        log_obj.update(getattr(record, 'extra_fields', {}))

        return json.dumps(log_obj, default=str)


def setup_logging(
    level: str = "INFO",
    json_format: bool = True,
    log_file: Optional[str] = None
) -> None:
    """Replace the root logger's handlers with stderr and an optional file.

    Args:
        level: Logging level name; unknown names fall back to INFO
        json_format: Whether to use JSON formatting
        log_file: Optional log file path
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    formatter = JSONFormatter() if json_format else logging.Formatter(PLAIN_FORMAT)

    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)


def configure_from_env(environ: Optional[Mapping[str, str]] = None) -> None:
    """Set up logging from ``LOG_LEVEL``, ``LOG_JSON`` and ``LOG_FILE``."""
    environ = os.environ if environ is None else environ
    setup_logging(
        level=environ.get('LOG_LEVEL', 'INFO'),
        json_format=environ.get('LOG_JSON', 'false').lower() == 'true',
        log_file=environ.get('LOG_FILE') or None
    )


class _ExtraFieldsAdapter(logging.LoggerAdapter):
    """Attach fixed fields to every record for the JSON formatter."""

    def process(self, msg, kwargs):
        kwargs['extra'] = {'extra_fields': self.extra}
        return msg, kwargs


def get_logger(name: str, extra_fields: Optional[Dict[str, Any]] = None):
    """Get a module logger, optionally carrying fixed extra fields.

    Args:
        name: Logger name
        extra_fields: Fields added to every JSON record

    Returns:
        Logger, or an adapter around it when extra fields are given
    """
    logger = logging.getLogger(name)
    if extra_fields:
        return _ExtraFieldsAdapter(logger, extra_fields)
    return logger


def log_database_query(query: str, params: Optional[tuple] = None,
                       logger_instance: Optional[logging.Logger] = None):
    """Log SQL at debug level on one line, truncated.

    Args:
        query: SQL query string
        params: Bound parameters
        logger_instance: Logger to use (defaults to this module's logger)
    """
    logger_instance = logger_instance or logging.getLogger(__name__)

    if len(query) > MAX_LOGGED_QUERY:
        query = query[:MAX_LOGGED_QUERY] + "..."
    display_query = ' '.join(query.split())

    if params:
        logger_instance.debug(f"SQL Query: {display_query} | Params: {params}")
    else:
        logger_instance.debug(f"SQL Query: {display_query}")


def log_error_with_context(error: Exception, context: dict,
                           logger_instance: Optional[logging.Logger] = None):
    """Log an error with the connection or request details it happened under.

    Args:
        error: Exception that occurred
        context: Details such as host and database; never credentials
        logger_instance: Logger to use (defaults to this module's logger)
    """
    logger_instance = logger_instance or logging.getLogger(__name__)
    logger_instance.error(
        f"{error.__class__.__name__}: {error} | Context: {context}",
        exc_info=True
    )
