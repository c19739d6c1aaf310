"""
Schema introspector — enumerates tables and columns from the database catalog.
Nothing is cached: every call opens a fresh Inspector so structural changes
made between requests are always visible.
"""
import logging
from typing import Any

from sqlalchemy import inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import CompileError, NoSuchTableError

from core.database import get_default_schema, transaction
from core.errors import NotFoundError
from models.table import ColumnDescriptor, TableDescriptor

logger = logging.getLogger(__name__)

ID_COLUMN = "id"
AUDIT_COLUMN = "created_at"
SOFT_DELETE_COLUMN = "is_deleted"
SERVER_OWNED_COLUMNS = (ID_COLUMN, AUDIT_COLUMN, "updated_at")

NUMBER_TYPES = {
    "integer", "int", "int2", "int4", "int8", "bigint", "smallint", "serial", "bigserial",
    "numeric", "decimal", "real", "float", "double", "double precision",
}


def list_tables(engine: Engine) -> list[TableDescriptor]:
    """All tables in the default namespace, ordered by name."""
    schema = get_default_schema(engine)
    with transaction(engine, "fetch tables") as conn:
        names = inspect(conn).get_table_names(schema=schema)
    return [TableDescriptor(table_name=n, table_schema=schema or "main") for n in sorted(names)]


def describe_table(engine: Engine, table_name: str) -> list[ColumnDescriptor]:
    """
    Columns of `table_name` in declared physical order.
    An unknown table yields an empty list rather than an error; callers that
    need to tell "missing" from "no columns" check `list_tables` as well.
    """
    schema = get_default_schema(engine)
    with transaction(engine, f"fetch schema for {table_name}") as conn:
        insp = inspect(conn)
        try:
            raw_columns = insp.get_columns(table_name, schema=schema)
            pk = insp.get_pk_constraint(table_name, schema=schema)
        except NoSuchTableError:
            return []

    pk_cols = set(pk.get("constrained_columns") or [])
    result = []
    for col in raw_columns:
        data_type = _type_name(col["type"], engine)
        length = getattr(col["type"], "length", None)
        default = col.get("default")
        result.append(ColumnDescriptor(
            column_name=col["name"],
            data_type=data_type,
            is_nullable=bool(col.get("nullable", True)),
            column_default=None if default is None else str(default),
            is_primary_key=col["name"] in pk_cols,
            max_length=length if isinstance(length, int) else None,
            input_type=infer_input_type(col["name"], data_type),
        ))
    return result


def require_table(engine: Engine, table_name: str) -> None:
    """Raise NotFoundError unless `table_name` is a table the catalog knows."""
    if table_name not in {t.table_name for t in list_tables(engine)}:
        raise NotFoundError("Table not found", f"No table named '{table_name}'")


def has_column(engine: Engine, table_name: str, column_name: str) -> bool:
    return any(c.column_name == column_name for c in describe_table(engine, table_name))


def infer_input_type(column_name: str, data_type: str) -> str:
    """Pick the grid editor for a column from its name and declared type."""
    if column_name == SOFT_DELETE_COLUMN:
        return "select"
    base = data_type.lower().split("(")[0].strip()
    if base.startswith("bool"):
        return "checkbox"
    if base.startswith("timestamp") or base == "datetime":
        return "datetime-local"
    if base in NUMBER_TYPES:
        return "number"
    return "text"


def initial_row(columns: list[ColumnDescriptor]) -> dict[str, Any]:
    """Blank new-row template for the grid, without server-owned columns."""
    row: dict[str, Any] = {}
    for col in columns:
        if col.column_name in (ID_COLUMN, AUDIT_COLUMN):
            continue
        if col.column_name == SOFT_DELETE_COLUMN:
            row[col.column_name] = "false"
        elif col.input_type == "number":
            row[col.column_name] = 0
        else:
            row[col.column_name] = ""
    return row


def _type_name(col_type, engine: Engine) -> str:
    try:
        return col_type.compile(dialect=engine.dialect).lower()
    except CompileError:
        # NullType and some reflected placeholders cannot be compiled
        return type(col_type).__name__.lower()
