"""
Builders for parameterized INSERT, UPDATE and DELETE statements
"""

from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

Where = Union[None, str, Mapping[str, Any]]


class StatementBuilder:
    """Builds statement text with named bind parameters.

    Value binds are named v0, v1, ... and condition binds w0, w1, ...
    so column names never have to be valid bind names.
    """

    def __init__(self, quote: Callable[[str], str]):
        """
        Args:
            quote: Function quoting an identifier for the target dialect
        """
        self.quote = quote

    def build_insert(self, table: str, values: Mapping[str, Any]) -> Tuple[str, Dict[str, Any]]:
        """
        Build INSERT statement

        Args:
            table: Target table
            values: Column values

        Returns:
            Tuple of (query, bind parameters)
        """
        if not values:
            raise ValueError("INSERT requires at least one column value")

        columns = []
        placeholders = []
        params = {}
        for i, (column, value) in enumerate(values.items()):
            columns.append(self.quote(column))
            placeholders.append(f":v{i}")
            params[f"v{i}"] = value

        query = (f"INSERT INTO {self.quote(table)} ({', '.join(columns)}) "
                 f"VALUES ({', '.join(placeholders)})")
        return query, params

    def build_update(self, table: str, values: Mapping[str, Any],
                     where: Where = None) -> Tuple[str, Dict[str, Any]]:
        """
        Build UPDATE statement

        Args:
            table: Target table
            values: Column values to set
            where: Raw condition string or column/value mapping

        Returns:
            Tuple of (query, bind parameters)
        """
        if not values:
            raise ValueError("UPDATE requires at least one column value")

        assignments = []
        params = {}
        for i, (column, value) in enumerate(values.items()):
            assignments.append(f"{self.quote(column)} = :v{i}")
            params[f"v{i}"] = value

        parts = [f"UPDATE {self.quote(table)} SET {', '.join(assignments)}"]
        clause = self.build_where(where, params)
        if clause:
            parts.append(clause)
        return ' '.join(parts), params

    def build_delete(self, table: str, where: Where = None) -> Tuple[str, Dict[str, Any]]:
        """
        Build DELETE statement

        Args:
            table: Target table
            where: Raw condition string or column/value mapping

        Returns:
            Tuple of (query, bind parameters)
        """
        params: Dict[str, Any] = {}
        parts = [f"DELETE FROM {self.quote(table)}"]
        clause = self.build_where(where, params)
        if clause:
            parts.append(clause)
        return ' '.join(parts), params

    def build_where(self, where: Where, params: Dict[str, Any]) -> Optional[str]:
        """
        Build WHERE clause, adding condition binds to params

        None values in a mapping become IS NULL tests.
        """
        if not where:
            return None
        if isinstance(where, str):
            return f"WHERE {where}"

        conditions: List[str] = []
        for i, (column, value) in enumerate(where.items()):
            if value is None:
                conditions.append(f"{self.quote(column)} IS NULL")
            else:
                conditions.append(f"{self.quote(column)} = :w{i}")
                params[f"w{i}"] = value
        return "WHERE " + ' AND '.join(conditions)
