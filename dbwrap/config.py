"""
Database configuration and engine management
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, URL
from typing import Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)

DEFAULT_PORTS = {
    'postgresql': 5432,
    'mysql': 3306,
    'mssql': 1433,
}


class DatabaseConfig:
    """Configuration manager for database connections"""

    @staticmethod
    def get_url(db_type: str, connection_params: Dict[str, Any]) -> URL:
        """
        Build SQLAlchemy URL for a database type

        Args:
            db_type: Database type ('sqlite', 'duckdb', 'postgresql', 'mysql', 'mssql')
            connection_params: Database connection parameters

        Returns:
            SQLAlchemy URL
        """
        if db_type in ('sqlite', 'duckdb'):
            # Requires duckdb-engine for duckdb
            database = connection_params.get('database') or ':memory:'
            return URL.create(db_type, database=database)

        if db_type == 'postgresql':
            drivername = 'postgresql+psycopg2'
            default_user, default_database = 'postgres', 'postgres'
        elif db_type == 'mysql':
            drivername = 'mysql+pymysql'
            default_user, default_database = 'root', None
        elif db_type == 'mssql':
            drivername = 'mssql+pyodbc'
            default_user, default_database = 'sa', 'master'
        else:
            raise ValueError(f"Unsupported database type: {db_type}")

        return URL.create(
            drivername,
            username=connection_params.get('user') or default_user,
            password=connection_params.get('password') or None,
            host=connection_params.get('host') or 'localhost',
            port=connection_params.get('port') or DEFAULT_PORTS[db_type],
            database=connection_params.get('database') or default_database,
        )

    @staticmethod
    def get_engine(db_type: str, connection_params: Dict[str, Any]) -> Engine:
        """
        Create SQLAlchemy engine based on database type and parameters

        Args:
            db_type: Database type ('sqlite', 'duckdb', 'postgresql', 'mysql', 'mssql')
            connection_params: Database connection parameters

        Returns:
            SQLAlchemy Engine instance
        """
        url = DatabaseConfig.get_url(db_type, connection_params)

        engine_args = dict(connection_params.get('engine_args') or {})
        engine_args.setdefault('pool_pre_ping', True)
        engine_args.setdefault('echo', False)

        logger.info(f"Creating {db_type} engine: {url.render_as_string(hide_password=True)}")
        return create_engine(url, **engine_args)

    @staticmethod
    def get_default_config(db_type: str, database_path: Optional[str] = None) -> Dict[str, Any]:
        """
        Get default configuration for a database type

        Args:
            db_type: Database type
            database_path: Optional database file path

        Returns:
            Default configuration dictionary
        """
        if db_type in ('sqlite', 'duckdb'):
            return {
                'db_type': db_type,
                'connection_params': {
                    'database': database_path or ':memory:',
                    'engine_args': {
                        'pool_pre_ping': True,
                        'echo': False
                    }
                }
            }
        elif db_type in DEFAULT_PORTS:
            return {
                'db_type': db_type,
                'connection_params': {
                    'user': None,
                    'password': '',
                    'host': 'localhost',
                    'port': DEFAULT_PORTS[db_type],
                    'database': database_path,
                    'engine_args': {
                        'pool_pre_ping': True,
                        'echo': False
                    }
                }
            }
        else:
            raise ValueError(f"Unsupported database type: {db_type}")
