"""
Database manager over a single SQLAlchemy connection

Wraps query execution, CRUD statement helpers, quoting and explicit
transactions, and records every statement in a QueryProfiler when
profiling is enabled.
"""

from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional

import pandas as pd
from sqlalchemy import text
from sqlalchemy.engine import Connection, Engine, Result, RootTransaction
from sqlalchemy.exc import SQLAlchemyError
import logging

from .errors import DatabaseOperationError, UnknownHandleError
from .logging_config import DatabaseLoggerAdapter
from .profiler import QueryProfiler
from .queries import StatementBuilder, Where
from .quoting import quote_identifier, quote_value

logger = logging.getLogger(__name__)

Params = Optional[Mapping[str, Any]]


class DatabaseManager:
    """Database manager using one lazily opened SQLAlchemy connection"""

    def __init__(self, engine: Engine, enable_profiler: bool = False,
                 slow_query_threshold: float = 1.0,
                 profiler: Optional[QueryProfiler] = None):
        """
        Initialize database manager with SQLAlchemy engine

        Args:
            engine: SQLAlchemy Engine instance
            enable_profiler: Record statement timings
            slow_query_threshold: Statements slower than this (seconds) are logged as warnings
            profiler: Profiler to record into; created on first use if omitted
        """
        self.engine = engine
        self.slow_query_threshold = slow_query_threshold
        self.db_type = engine.dialect.name
        self.log = DatabaseLoggerAdapter(logger, {'database_context': self.db_type})

        self._connection: Optional[Connection] = None
        self._transaction: Optional[RootTransaction] = None
        self._profiler = profiler
        self._profiler_enabled = bool(enable_profiler)
        self._last_insert_id: Any = None
        self._builder = StatementBuilder(self.quote_identifier)

    # Connection lifecycle

    def connect(self) -> None:
        """Open the connection if it is not open yet"""
        if self.is_connected():
            return

        with self._profiled('connection'):
            self._connection = self.engine.connect()
        self.log.connection_event('opened', self.engine.url.render_as_string(hide_password=True))

    def close(self) -> None:
        """Close the connection; an open transaction is rolled back"""
        if self._connection is None:
            return

        connection = self._connection
        self._connection = None
        self._transaction = None
        connection.close()
        self.log.connection_event('closed')

    def is_connected(self) -> bool:
        return self._connection is not None and not self._connection.closed

    def get_connection(self) -> Connection:
        """Return the connection, opening it if needed"""
        self.connect()
        return self._connection

    # Profiling

    @property
    def profiler(self) -> QueryProfiler:
        if self._profiler is None:
            self._profiler = QueryProfiler()
        return self._profiler

    @property
    def profiler_enabled(self) -> bool:
        return self._profiler_enabled

    @profiler_enabled.setter
    def profiler_enabled(self, enable: bool) -> None:
        self._profiler_enabled = bool(enable)

    def start_profiler(self, sql: str, params: Any = None) -> Optional[int]:
        """
        Open a profile entry

        Args:
            sql: SQL text or operation tag
            params: Parameter payload stored with the entry

        Returns:
            Profile handle, or None when profiling is disabled
        """
        if not self._profiler_enabled:
            return None
        return self.profiler.open(sql, params)

    def end_profiler(self, handle: Optional[int]) -> None:
        """Close a profile entry opened by start_profiler"""
        if not self._profiler_enabled or handle is None:
            return

        self.profiler.close(handle)
        profile = self.profiler.get_entry(handle)
        self.log.query(profile.label, profile.parameters, profile.duration)
        if profile.duration > self.slow_query_threshold:
            self.log.warning(f"Slow query ({profile.duration:.3f}s): {profile.label}")

    @contextmanager
    def _profiled(self, label: str, params: Any = None) -> Iterator[None]:
        """Bracket a driver call with a profile entry and translate driver errors"""
        handle = self.start_profiler(label, params)
        try:
            yield
        except SQLAlchemyError as e:
            self._end_profiler_after_error(handle)
            self.log.error(f"Database operation failed: {label}: {e}")
            raise DatabaseOperationError.from_exception(e) from e
        except Exception:
            self._end_profiler_after_error(handle)
            raise
        self.end_profiler(handle)

    def _end_profiler_after_error(self, handle: Optional[int]) -> None:
        # the operation's own error must propagate, not a stale handle
        try:
            self.end_profiler(handle)
        except UnknownHandleError as e:
            self.log.warning(f"Could not close profile entry: {e}")

    # Dialect helpers

    @property
    def driver_name(self) -> str:
        return self.engine.dialect.name.lower()

    def quote_identifier(self, identifier: str) -> str:
        """
        Quote table or column name for the current dialect

        Args:
            identifier: Identifier, optionally dotted ('schema.table')

        Returns:
            Quoted identifier
        """
        return quote_identifier(identifier, self.driver_name)

    def quote_value(self, value: Any) -> Any:
        """
        Quote string value as a SQL literal

        Args:
            value: Value to quote; non-strings are returned unchanged

        Returns:
            Quoted literal
        """
        return quote_value(value, self.engine.dialect)

    # Query helpers

    def _run(self, sql: str, params: Params, fetch: Callable[[Result], Any],
             payload: Any = None) -> Any:
        conn = self.get_connection()
        profile_params = payload if payload is not None else params

        with self._profiled(sql, profile_params):
            try:
                result = conn.execute(text(sql), dict(params or {}))
                if not result.returns_rows and result.lastrowid:
                    self._last_insert_id = result.lastrowid
                value = fetch(result)
                if self._transaction is None:
                    conn.commit()
            except SQLAlchemyError:
                if self._transaction is None:
                    _rollback_autocommit(conn)
                raise

        return value

    def execute(self, sql: str, params: Params = None) -> int:
        """
        Execute statement

        Args:
            sql: SQL statement with :name binds
            params: Bind parameters

        Returns:
            Number of affected rows; 0 when the driver cannot tell
        """
        return self._run(sql, params, _rowcount)

    def find_rows(self, sql: str, params: Params = None) -> List[Dict[str, Any]]:
        """Execute query and return all rows as dictionaries"""
        return self._run(sql, params, lambda result: [dict(row) for row in result.mappings()])

    def find_row(self, sql: str, params: Params = None) -> Optional[Dict[str, Any]]:
        """Execute query and return the first row, or None"""
        def first(result: Result) -> Optional[Dict[str, Any]]:
            row = result.mappings().first()
            return dict(row) if row is not None else None
        return self._run(sql, params, first)

    def find_first_column(self, sql: str, params: Params = None) -> List[Any]:
        """Execute query and return the first column of every row"""
        return self._run(sql, params, lambda result: result.scalars().all())

    def find_one(self, sql: str, params: Params = None) -> Any:
        """Execute query and return the first column of the first row"""
        return self._run(sql, params, lambda result: result.scalar())

    def find_df(self, sql: str, params: Params = None) -> pd.DataFrame:
        """
        Execute query and return as DataFrame

        Args:
            sql: SQL query with :name binds
            params: Bind parameters

        Returns:
            Pandas DataFrame with results
        """
        return self._run(sql, params, _to_dataframe)

    def last_insert_id(self) -> Any:
        """Row id generated by the most recent INSERT, as reported by the driver"""
        return self._last_insert_id

    # Statement builders

    def insert(self, table: str, values: Mapping[str, Any]) -> int:
        """
        Insert one row

        Args:
            table: Name of target table
            values: Column values

        Returns:
            Number of rows inserted
        """
        sql, params = self._builder.build_insert(table, values)
        return self._run(sql, params, _rowcount, payload=dict(values))

    def update(self, table: str, values: Mapping[str, Any], where: Where = None) -> int:
        """
        Update rows

        Args:
            table: Name of target table
            values: Column values to set
            where: Raw condition string or column/value mapping (None values match NULL)

        Returns:
            Number of rows updated
        """
        sql, params = self._builder.build_update(table, values, where)
        return self._run(sql, params, _rowcount,
                         payload={'params': dict(values), 'where': where})

    def delete(self, table: str, where: Where = None) -> int:
        """
        Delete rows

        Args:
            table: Name of target table
            where: Raw condition string or column/value mapping; None deletes all rows

        Returns:
            Number of rows deleted
        """
        sql, params = self._builder.build_delete(table, where)
        return self._run(sql, params, _rowcount, payload={'where': where})

    # Transactions

    def in_transaction(self) -> bool:
        return self._transaction is not None and self._transaction.is_active

    def begin_transaction(self) -> bool:
        """Begin explicit transaction"""
        conn = self.get_connection()
        with self._profiled('begin transaction'):
            self._transaction = conn.begin()
        self.log.transaction('begin', True)
        return True

    def commit(self) -> bool:
        """Commit the explicit transaction"""
        self.get_connection()
        with self._profiled('commit transaction'):
            transaction = self._pop_transaction()
            transaction.commit()
        self.log.transaction('commit', True)
        return True

    def rollback(self) -> bool:
        """Roll back the explicit transaction"""
        self.get_connection()
        with self._profiled('rollback transaction'):
            transaction = self._pop_transaction()
            transaction.rollback()
        self.log.transaction('rollback', True)
        return True

    def _pop_transaction(self) -> RootTransaction:
        if not self.in_transaction():
            raise DatabaseOperationError("There is no active transaction")
        transaction = self._transaction
        self._transaction = None
        return transaction

    @contextmanager
    def transaction(self) -> Iterator['DatabaseManager']:
        """Run a block in a transaction, rolling back if it raises"""
        self.begin_transaction()
        try:
            yield self
        except Exception as e:
            if self.in_transaction():
                self.rollback()
            self.log.transaction('block', False, str(e))
            raise
        self.commit()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        self.engine.dispose()


def _rowcount(result: Result) -> int:
    # drivers report -1 when the count is undefined (SELECT, DDL)
    if result.rowcount is None or result.rowcount < 0:
        return 0
    return result.rowcount


def _to_dataframe(result: Result) -> pd.DataFrame:
    return pd.DataFrame(result.fetchall(), columns=list(result.keys()))


def _rollback_autocommit(conn: Connection) -> None:
    transaction = conn.get_transaction()
    if transaction is not None and not transaction.is_active:
        # a failed COMMIT leaves the driver transaction open
        conn.connection.dbapi_connection.rollback()
    conn.rollback()
