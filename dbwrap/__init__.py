"""
Thin convenience layer over SQLAlchemy connections.

Components:
- base_manager: connection lifecycle, query helpers, transactions
- profiler: per-manager query timing
- quoting: identifier and value quoting per dialect
- queries: INSERT/UPDATE/DELETE statement builders
- config, settings, engine_factory: engine and manager construction
"""

__version__ = "1.0.0"

from .errors import DatabaseError, DatabaseOperationError, UnknownHandleError
from .profiler import QueryProfiler, ProfileSnapshot
from .base_manager import DatabaseManager
from .config import DatabaseConfig
from .settings import DatabaseSettings, DatabaseType, load_settings
from .engine_factory import DatabaseFactory
from .logging_config import setup_db_logging, DatabaseLoggerAdapter

__all__ = [
    "DatabaseError",
    "DatabaseOperationError",
    "UnknownHandleError",
    "QueryProfiler",
    "ProfileSnapshot",
    "DatabaseManager",
    "DatabaseConfig",
    "DatabaseSettings",
    "DatabaseType",
    "load_settings",
    "DatabaseFactory",
    "setup_db_logging",
    "DatabaseLoggerAdapter",
]
