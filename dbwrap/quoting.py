"""
Identifier and value quoting per database dialect
"""

from typing import Any, Optional

from sqlalchemy import String
from sqlalchemy.engine import Dialect

BRACKET_DIALECTS = frozenset({'mssql', 'sqlsrv', 'dblib'})
BACKTICK_DIALECTS = frozenset({'mysql', 'mariadb', 'sqlite'})

# addcslashes-style escapes applied after single quotes are doubled
_ESCAPES = {
    '\\': '\\\\',
    '\x00': '\\000',
    '\n': '\\n',
    '\r': '\\r',
    '\x1a': '\\032',
}


def quote_identifier(identifier: str, dialect: Optional[str]) -> str:
    """
    Quote a possibly dotted identifier for the given dialect

    Args:
        identifier: Identifier such as 'users' or 'main.users'
        dialect: Dialect name ('sqlite', 'postgresql', 'mssql', ...)

    Returns:
        Quoted identifier, each dot-separated segment quoted separately
    """
    return '.'.join(_quote_segment(part, dialect) for part in identifier.split('.'))


def _quote_segment(segment: str, dialect: Optional[str]) -> str:
    if segment == '*':
        return segment
    if dialect in BRACKET_DIALECTS:
        return f'[{segment}]'
    if dialect in BACKTICK_DIALECTS:
        return '`' + segment.replace('`', '``') + '`'
    return '"' + segment.replace('"', '\\"') + '"'


def escape_value(value: str) -> str:
    """
    Quote a string literal by hand

    Used when the dialect cannot render a string literal itself.

    Args:
        value: Raw string

    Returns:
        Single-quoted literal with quotes doubled and control characters escaped
    """
    doubled = value.replace("'", "''")
    return "'" + ''.join(_ESCAPES.get(ch, ch) for ch in doubled) + "'"


def quote_value(value: Any, dialect: Dialect) -> Any:
    """
    Quote a value as a SQL literal

    Args:
        value: Value to quote; non-strings are returned unchanged
        dialect: SQLAlchemy dialect used to render the literal

    Returns:
        Quoted literal
    """
    if not isinstance(value, str):
        return value

    processor = String().dialect_impl(dialect).literal_processor(dialect)
    if processor is None:
        return escape_value(value)
    return processor(value)
