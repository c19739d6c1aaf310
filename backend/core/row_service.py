"""
Generic row service — list/insert/update/delete against any catalog table.

Only identifiers (table and column names) are interpolated into SQL text, and
only after they have been matched against names the introspector just read
from the catalog. Every value travels as a bound parameter.
"""
import base64
import logging
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from sqlalchemy import Numeric, bindparam, text
from sqlalchemy.engine import Engine

from config import settings
from core.database import qualified_name, quote, transaction
from core.errors import NotFoundError, ValidationError
from core.introspector import (
    ID_COLUMN,
    SERVER_OWNED_COLUMNS,
    SOFT_DELETE_COLUMN,
    describe_table,
    require_table,
)
from models.table import ColumnDescriptor

logger = logging.getLogger(__name__)

INTEGER_TYPES = {"integer", "int", "int2", "int4", "int8", "bigint", "smallint", "serial", "bigserial"}


# ── Value handling ────────────────────────────────────────────────────────────

def serialize_value(value: Any) -> Any:
    """Convert database values to JSON-serializable format."""
    if value is None:
        return None
    if isinstance(value, (date, datetime, time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (bytes, memoryview)):
        return f"base64:{base64.b64encode(bytes(value)).decode('ascii')}"
    return value


def serialize_row(row: dict) -> dict:
    return {k: serialize_value(v) for k, v in row.items()}


def coerce_value(column: ColumnDescriptor, value: Any) -> Any:
    """
    Coerce a client-supplied value to the column's family before binding.
    Grid editors send everything as strings; text columns pass through.
    """
    if not isinstance(value, str) or column.input_type in ("text", "select"):
        return value
    raw = value.strip()
    if raw == "":
        if column.is_nullable:
            return None
        raise ValidationError("Invalid value", f"Column '{column.column_name}' requires a value")
    if column.input_type == "number":
        return _parse_number(column, raw)
    if column.input_type == "checkbox":
        lowered = raw.lower()
        if lowered in ("true", "t", "1", "yes"):
            return True
        if lowered in ("false", "f", "0", "no"):
            return False
        raise ValidationError(
            "Invalid value",
            f"Column '{column.column_name}' expects true or false, got {value!r}",
        )
    return value


def _parse_number(column: ColumnDescriptor, raw: str):
    """int for integer families, Decimal for everything else so no digits are lost."""
    base = column.data_type.split("(")[0].strip()
    try:
        if base in INTEGER_TYPES:
            return int(raw)
        number = Decimal(raw)
    except (ValueError, InvalidOperation) as e:
        raise ValidationError(
            "Invalid value",
            f"Column '{column.column_name}' expects a number, got {raw!r}",
        ) from e
    if not number.is_finite():
        raise ValidationError(
            "Invalid value",
            f"Column '{column.column_name}' expects a finite number, got {raw!r}",
        )
    return number


def strip_server_owned(payload: dict) -> dict:
    """Drop id/created_at/updated_at; the database owns those."""
    return {k: v for k, v in payload.items() if k not in SERVER_OWNED_COLUMNS}


# ── Helpers ───────────────────────────────────────────────────────────────────

def _table_columns(engine: Engine, table_name: str) -> list[ColumnDescriptor]:
    require_table(engine, table_name)
    return describe_table(engine, table_name)


def _require_id_column(columns: list[ColumnDescriptor], table_name: str) -> None:
    if not any(c.column_name == ID_COLUMN for c in columns):
        raise ValidationError(
            "Unsupported table",
            f"Table '{table_name}' has no '{ID_COLUMN}' column to address rows by",
        )


def _bind_payload(columns: list[ColumnDescriptor], payload: dict) -> dict[str, Any]:
    """Check payload keys against the catalog and coerce values, keeping key order."""
    by_name = {c.column_name: c for c in columns}
    unknown = [k for k in payload if k not in by_name]
    if unknown:
        raise ValidationError("Unknown columns", ", ".join(sorted(unknown)))
    return {k: coerce_value(by_name[k], v) for k, v in payload.items()}


def _statement(sql: str, params: dict[str, Any]):
    """text() with Decimal values typed as Numeric so each driver binds them natively."""
    stmt = text(sql)
    decimals = [bindparam(p, type_=Numeric(asdecimal=True)) for p, v in params.items() if isinstance(v, Decimal)]
    return stmt.bindparams(*decimals) if decimals else stmt


def _order_column(columns: list[ColumnDescriptor]) -> Optional[str]:
    names = [c.column_name for c in columns]
    if ID_COLUMN in names:
        return ID_COLUMN
    pks = [c.column_name for c in columns if c.is_primary_key]
    return pks[0] if pks else None


# ── Operations ────────────────────────────────────────────────────────────────

def list_rows(engine: Engine, table_name: str) -> list[dict]:
    """Every row of the table, `id` ascending."""
    columns = _table_columns(engine, table_name)
    sql = f"SELECT * FROM {qualified_name(engine, table_name)}"
    order_col = _order_column(columns)
    if order_col:
        sql += f" ORDER BY {quote(engine, order_col)}"
    with transaction(engine, f"fetch rows from {table_name}") as conn:
        rows = conn.execute(text(sql)).mappings().all()
    return [serialize_row(dict(r)) for r in rows]


def insert_row(engine: Engine, table_name: str, payload: dict) -> dict:
    """Insert one row and return it as stored, generated columns included."""
    values = strip_server_owned(payload)
    columns = _table_columns(engine, table_name)
    values = _bind_payload(columns, values)

    qt = qualified_name(engine, table_name)
    params = {f"v{i}": v for i, v in enumerate(values.values())}
    if values:
        col_sql = ", ".join(quote(engine, name) for name in values)
        placeholders = ", ".join(f":{p}" for p in params)
        sql = f"INSERT INTO {qt} ({col_sql}) VALUES ({placeholders}) RETURNING *"
    else:
        sql = f"INSERT INTO {qt} DEFAULT VALUES RETURNING *"

    with transaction(engine, f"insert row into {table_name}") as conn:
        row = conn.execute(_statement(sql, params), params).mappings().one()
    return serialize_row(dict(row))


def update_row(engine: Engine, table_name: str, row_id: int, payload: dict) -> dict:
    """Apply `payload` to the row with `id = row_id` and return the result."""
    values = strip_server_owned(payload)
    if not values:
        raise ValidationError("No valid columns to update", "Payload is empty once id/created_at/updated_at are removed")
    columns = _table_columns(engine, table_name)
    _require_id_column(columns, table_name)
    values = _bind_payload(columns, values)

    params = {f"v{i}": v for i, v in enumerate(values.values())}
    set_clause = ", ".join(f"{quote(engine, name)} = :{p}" for name, p in zip(values, params))
    params["row_id"] = row_id
    sql = (
        f"UPDATE {qualified_name(engine, table_name)} SET {set_clause} "
        f"WHERE {quote(engine, ID_COLUMN)} = :row_id RETURNING *"
    )

    with transaction(engine, f"update row {row_id} in {table_name}") as conn:
        row = conn.execute(_statement(sql, params), params).mappings().first()
    if row is None:
        raise NotFoundError("Row not found", f"No row with id {row_id} in '{table_name}'")
    return serialize_row(dict(row))


def delete_row(engine: Engine, table_name: str, row_id: int, hard: bool = False) -> bool:
    """
    Delete the row with `id = row_id`.

    Soft deletion sets `is_deleted = 'true'` and needs that column on the
    table. Without it the row is removed physically, unless
    SOFT_DELETE_FALLBACK is off, in which case the request is refused.
    Returns whether a row was affected.
    """
    columns = _table_columns(engine, table_name)
    _require_id_column(columns, table_name)
    qt = qualified_name(engine, table_name)
    where = f"WHERE {quote(engine, ID_COLUMN)} = :row_id"

    if not hard:
        if any(c.column_name == SOFT_DELETE_COLUMN for c in columns):
            sql = f"UPDATE {qt} SET {quote(engine, SOFT_DELETE_COLUMN)} = :flag {where}"
            with transaction(engine, f"soft-delete row {row_id} in {table_name}") as conn:
                affected = conn.execute(text(sql), {"flag": "true", "row_id": row_id}).rowcount
            return affected > 0
        if not settings.SOFT_DELETE_FALLBACK:
            raise ValidationError(
                "Soft delete not supported",
                f"Table '{table_name}' has no '{SOFT_DELETE_COLUMN}' column",
            )
        logger.warning(
            "Table %s has no %s column; deleting row %s permanently",
            table_name, SOFT_DELETE_COLUMN, row_id,
        )

    with transaction(engine, f"delete row {row_id} from {table_name}") as conn:
        affected = conn.execute(text(f"DELETE FROM {qt} {where}"), {"row_id": row_id}).rowcount
    return affected == 1
