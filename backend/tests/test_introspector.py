import pytest

from core.errors import NotFoundError
from core.introspector import (
    describe_table,
    has_column,
    infer_input_type,
    initial_row,
    list_tables,
    require_table,
)


def test_list_tables_sorted_with_schema(engine):
    tables = list_tables(engine)
    assert [t.table_name for t in tables] == ["curator_dialog", "users"]
    assert all(t.table_schema == "main" for t in tables)


def test_describe_table_in_declared_order(engine):
    columns = describe_table(engine, "users")
    assert [c.column_name for c in columns] == ["id", "name", "email", "age", "created_at"]
    # no caching, but the catalog answer is stable
    assert describe_table(engine, "users") == columns


def test_describe_table_metadata(engine):
    by_name = {c.column_name: c for c in describe_table(engine, "users")}
    assert by_name["id"].is_primary_key is True
    assert by_name["name"].is_nullable is False
    assert by_name["email"].is_nullable is True
    assert by_name["age"].data_type == "integer"
    assert by_name["age"].input_type == "number"
    assert by_name["created_at"].input_type == "datetime-local"
    assert by_name["created_at"].column_default == "CURRENT_TIMESTAMP"


def test_describe_table_reports_varchar_length(engine):
    by_name = {c.column_name: c for c in describe_table(engine, "curator_dialog")}
    assert by_name["dialog_line"].max_length == 255
    assert by_name["is_deleted"].input_type == "select"


def test_describe_unknown_table_is_empty(engine):
    assert describe_table(engine, "no_such_table") == []


def test_require_table(engine):
    require_table(engine, "users")
    with pytest.raises(NotFoundError):
        require_table(engine, "no_such_table")


def test_has_column(engine):
    assert has_column(engine, "curator_dialog", "is_deleted")
    assert not has_column(engine, "users", "is_deleted")


@pytest.mark.parametrize("name, data_type, expected", [
    ("is_deleted", "varchar(5)", "select"),
    ("count", "integer", "number"),
    ("total", "numeric(10, 2)", "number"),
    ("ratio", "double precision", "number"),
    ("active", "boolean", "checkbox"),
    ("seen_at", "timestamp without time zone", "datetime-local"),
    ("span", "interval", "text"),
    ("title", "varchar(100)", "text"),
])
def test_infer_input_type(name, data_type, expected):
    assert infer_input_type(name, data_type) == expected


def test_initial_row_skips_server_owned_columns(engine):
    assert initial_row(describe_table(engine, "users")) == {"name": "", "email": "", "age": 0}
    assert initial_row(describe_table(engine, "curator_dialog")) == {"dialog_line": "", "is_deleted": "false"}
