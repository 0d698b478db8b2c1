"""
Database engine factory for creating database managers
"""

from typing import Dict, Any, List, Optional
import logging

from .config import DatabaseConfig
from .base_manager import DatabaseManager
from .settings import DatabaseSettings, DatabaseType

logger = logging.getLogger(__name__)


class DatabaseFactory:
    """Factory for creating database managers"""

    @staticmethod
    def create_manager(db_type: str, connection_params: Optional[Dict[str, Any]] = None,
                       enable_profiler: bool = False,
                       slow_query_threshold: float = 1.0) -> DatabaseManager:
        """
        Create database manager

        Args:
            db_type: Database type ('sqlite', 'duckdb', 'postgresql', 'mysql', 'mssql')
            connection_params: Database connection parameters
            enable_profiler: Record statement timings
            slow_query_threshold: Log statements slower than this (seconds)

        Returns:
            DatabaseManager instance
        """
        engine = DatabaseConfig.get_engine(db_type, connection_params or {})
        manager = DatabaseManager(engine, enable_profiler=enable_profiler,
                                  slow_query_threshold=slow_query_threshold)

        logger.info(f"Created {db_type} database manager (profiler {'on' if enable_profiler else 'off'})")
        return manager

    @staticmethod
    def create_from_config(config: Dict[str, Any]) -> DatabaseManager:
        """
        Create database manager from configuration dictionary

        Args:
            config: Configuration with 'db_type' and 'connection_params' keys,
                optionally 'enable_profiler' and 'slow_query_threshold'

        Returns:
            DatabaseManager instance
        """
        db_type = config.get('db_type')
        if not db_type:
            raise ValueError("Configuration must include 'db_type'")

        return DatabaseFactory.create_manager(
            db_type,
            config.get('connection_params', {}),
            enable_profiler=config.get('enable_profiler', False),
            slow_query_threshold=config.get('slow_query_threshold', 1.0),
        )

    @staticmethod
    def create_from_settings(settings: DatabaseSettings) -> DatabaseManager:
        """Create database manager from validated settings, applying its log level"""
        logging.getLogger('dbwrap').setLevel(settings.log_level.value)
        return DatabaseFactory.create_manager(
            settings.db_type.value,
            settings.connection_params(),
            enable_profiler=settings.enable_profiler,
            slow_query_threshold=settings.slow_query_threshold,
        )

    @staticmethod
    def get_supported_databases() -> List[str]:
        return [db_type.value for db_type in DatabaseType]
