"""Unit tests for database exceptions."""

import sqlite3

from sqlalchemy.exc import OperationalError

from dbwrap.errors import DatabaseError, DatabaseOperationError, UnknownHandleError


class TestDatabaseErrors:

    def test_hierarchy(self):
        assert issubclass(DatabaseOperationError, DatabaseError)
        assert issubclass(UnknownHandleError, DatabaseError)
        assert isinstance(DatabaseOperationError(), Exception)

    def test_unknown_handle_message(self):
        error = UnknownHandleError(3)
        assert str(error) == "Profiler has no query with handle '3'."
        assert error.handle == 3

    def test_wraps_driver_error(self):
        orig = sqlite3.OperationalError("no such table: t")
        exc = OperationalError("SELECT * FROM t", {}, orig)

        error = DatabaseOperationError.from_exception(exc)
        assert error.message == "no such table: t"
        assert str(error) == "no such table: t"
        assert error.original is exc
        assert error.code

    def test_numeric_code_from_args(self):
        class DriverError(Exception):
            pass

        error = DatabaseOperationError.from_exception(DriverError(1045, "Access denied"))
        assert error.code == 1045

    def test_explicit_code(self):
        error = DatabaseOperationError("boom", 42)
        assert error.code == 42
        assert error.message == "boom"
