"""
Exceptions raised by the database layer
"""

from typing import Any, Optional, Union


class DatabaseError(Exception):
    """Base exception for database layer errors."""
    pass


class DatabaseOperationError(DatabaseError):
    """Raised when the underlying driver reports a failure."""

    def __init__(self, message: str = '', code: Union[int, str] = 0,
                 original: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.original = original

    @classmethod
    def from_exception(cls, exc: BaseException) -> 'DatabaseOperationError':
        """
        Wrap a SQLAlchemy or DBAPI exception

        Args:
            exc: Exception raised by the driver

        Returns:
            DatabaseOperationError carrying the original message and code
        """
        orig = getattr(exc, 'orig', None) or exc
        message = str(orig) if str(orig) else str(exc)
        return cls(message, _error_code(exc, orig), exc)


class UnknownHandleError(DatabaseError, LookupError):
    """Raised when a profiler handle does not resolve to a live entry."""

    def __init__(self, handle: Any):
        super().__init__(f"Profiler has no query with handle '{handle}'.")
        self.handle = handle


def _error_code(exc: BaseException, orig: BaseException) -> Union[int, str]:
    """Pick the most specific error code available on a driver exception."""
    for attr in ('sqlite_errorcode', 'pgcode', 'errno'):
        code = getattr(orig, attr, None)
        if code is not None:
            return code

    args = getattr(orig, 'args', ())
    if args and isinstance(args[0], int):
        return args[0]

    # SQLAlchemy attaches a short error code ("e3q8") to its exceptions
    return getattr(exc, 'code', None) or 0
