"""Unit tests for statement builders."""

import pytest

from dbwrap.queries import StatementBuilder
from dbwrap.quoting import quote_identifier


@pytest.fixture
def builder():
    return StatementBuilder(lambda name: quote_identifier(name, 'postgresql'))


class TestStatementBuilder:
    """Test INSERT/UPDATE/DELETE text and binds."""

    def test_insert(self, builder):
        query, params = builder.build_insert('users', {'name': 'Ann', 'age': 30})
        assert query == 'INSERT INTO "users" ("name", "age") VALUES (:v0, :v1)'
        assert params == {'v0': 'Ann', 'v1': 30}

    def test_insert_requires_values(self, builder):
        with pytest.raises(ValueError):
            builder.build_insert('users', {})

    def test_update_with_mapping(self, builder):
        query, params = builder.build_update('users', {'name': 'Ann'}, {'id': 1, 'deleted_at': None})
        assert query == 'UPDATE "users" SET "name" = :v0 WHERE "id" = :w0 AND "deleted_at" IS NULL'
        assert params == {'v0': 'Ann', 'w0': 1}

    def test_update_without_where(self, builder):
        query, params = builder.build_update('users', {'active': False})
        assert query == 'UPDATE "users" SET "active" = :v0'
        assert params == {'v0': False}

    def test_update_requires_values(self, builder):
        with pytest.raises(ValueError):
            builder.build_update('users', {}, {'id': 1})

    def test_delete_with_string_where(self, builder):
        query, params = builder.build_delete('public.users', "age > 30")
        assert query == 'DELETE FROM "public"."users" WHERE age > 30'
        assert params == {}

    def test_delete_with_empty_where(self, builder):
        query, params = builder.build_delete('users', {})
        assert query == 'DELETE FROM "users"'
        assert params == {}

    def test_column_names_never_used_as_binds(self, builder):
        query, params = builder.build_insert('t', {'odd column': 1, 'x.y': 2})
        assert ':odd' not in query
        assert set(params) == {'v0', 'v1'}
