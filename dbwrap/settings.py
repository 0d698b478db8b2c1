"""
Settings schema for database connections

Settings can be built directly or loaded from the `database` section
of a YAML file.
"""

from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import BaseModel, Field, field_validator


class DatabaseType(str, Enum):
    """Supported database types."""
    SQLITE = "sqlite"
    DUCKDB = "duckdb"
    POSTGRESQL = "postgresql"
    MYSQL = "mysql"
    MSSQL = "mssql"


class LogLevel(str, Enum):
    """Valid logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class DatabaseSettings(BaseModel):
    """Connection and profiling settings."""
    db_type: DatabaseType = DatabaseType.SQLITE
    database: Optional[str] = Field(None, description="Database name or file path")
    user: Optional[str] = None
    password: Optional[str] = None
    host: Optional[str] = None
    port: Optional[int] = Field(None, ge=1, le=65535)
    engine_args: Dict[str, Any] = Field(default_factory=dict)
    enable_profiler: bool = False
    slow_query_threshold: float = Field(1.0, gt=0, description="Log queries slower than this (seconds)")
    log_level: LogLevel = LogLevel.INFO

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_log_level(cls, v):
        if isinstance(v, str):
            return v.upper()
        return v

    def connection_params(self) -> Dict[str, Any]:
        """Connection parameters in the form DatabaseConfig.get_engine expects."""
        return {
            'database': self.database,
            'user': self.user,
            'password': self.password,
            'host': self.host,
            'port': self.port,
            'engine_args': dict(self.engine_args),
        }


def load_settings(path: Union[str, Path]) -> DatabaseSettings:
    """
    Load settings from a YAML file

    Args:
        path: YAML file; the `database` section is used when present

    Returns:
        Validated settings
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")

    with open(path, 'r') as f:
        data = yaml.safe_load(f) or {}

    if isinstance(data.get('database'), dict):
        data = data['database']
    return DatabaseSettings(**data)
