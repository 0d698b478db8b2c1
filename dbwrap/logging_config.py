"""
Database logging configuration.

Sets up the `dbwrap` logger and provides an adapter the database manager
uses to report queries, transactions and connection events.
"""

import logging
import re
import sys
from typing import Dict, Any, Optional

# user:password@ in connection URLs
_URL_PASSWORD = re.compile(r'(://[^:/@\s]+:)[^@\s]+@')


class SafeFormatter(logging.Formatter):
    """Formatter that provides default values for missing fields."""

    def format(self, record):
        if not hasattr(record, 'database_context'):
            record.database_context = 'db'
        return super().format(record)


class SensitiveDataFilter(logging.Filter):
    """Logging filter that hides passwords in connection URLs."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = _URL_PASSWORD.sub(r'\1***@', str(record.msg))
        if record.args:
            record.args = tuple(
                _URL_PASSWORD.sub(r'\1***@', arg) if isinstance(arg, str) else arg
                for arg in record.args
            )
        return True


def setup_db_logging(config: Optional[Dict[str, Any]] = None) -> logging.Logger:
    """
    Setup database logging

    Args:
        config: Mapping with an optional `logging` section holding
            `level` (default INFO) and `file` (optional log file path)

    Returns:
        Configured `dbwrap` logger
    """
    logging_config = (config or {}).get('logging', {})
    log_level = str(logging_config.get('level', 'INFO')).upper()

    logger = logging.getLogger('dbwrap')
    logger.setLevel(getattr(logging, log_level))

    # Remove any existing handlers to avoid duplicates
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    formatter = SafeFormatter(
        '%(asctime)s.%(msecs)03d - [%(database_context)s] - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    sensitive_filter = SensitiveDataFilter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(sensitive_filter)
    logger.addHandler(console_handler)

    log_file = logging_config.get('file')
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        file_handler.addFilter(sensitive_filter)
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger


class DatabaseLoggerAdapter(logging.LoggerAdapter):
    """
    Logger adapter that adds database context to log messages.

    The context is the dialect name (or any label passed as
    `database_context`), available to formatters as %(database_context)s.
    """

    def __init__(self, logger: logging.Logger, extra: Optional[Dict[str, Any]] = None):
        super().__init__(logger, extra or {})

    def process(self, msg, kwargs):
        kwargs.setdefault('extra', {})
        kwargs['extra']['database_context'] = self.extra.get('database_context', 'db')
        return msg, kwargs

    def query(self, query: str, params: Any = None, duration: Optional[float] = None) -> None:
        """Log a database query."""
        if not self.isEnabledFor(logging.DEBUG):
            return
        message = f"Query: {query}"
        if params:
            message += f" | Params: {params}"
        if duration is not None:
            message += f" | Duration: {duration:.3f}s"
        self.debug(message)

    def transaction(self, operation: str, success: bool, error: Optional[str] = None) -> None:
        """Log a database transaction."""
        if success:
            self.debug(f"Transaction '{operation}' completed successfully")
        else:
            message = f"Transaction '{operation}' failed"
            if error:
                message += f": {error}"
            self.error(message)

    def connection_event(self, event: str, details: Optional[str] = None) -> None:
        """Log a connection event."""
        message = f"Connection {event}"
        if details:
            message += f": {details}"
        if event == 'error':
            self.error(message)
        else:
            self.debug(message)
