"""
Table definition service — validates a column design, renders CREATE TABLE DDL
for the connected dialect, and drops tables.
Every table created here ends up with a `created_at` audit column.
"""
import logging
import re
from typing import Optional

from sqlalchemy.engine import Dialect, Engine

from core.database import get_default_schema, qualified_name, transaction
from core.errors import ValidationError
from core.introspector import AUDIT_COLUMN, has_column, list_tables, require_table
from models.column_spec import SCALED_NUMERIC_TYPES, SIZED_TEXT_TYPES, ColumnSpec

logger = logging.getLogger(__name__)

IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
INTEGER_LITERAL_RE = re.compile(r"^-?\d+$")
DECIMAL_LITERAL_RE = re.compile(r"^-?\d+(\.\d+)?$")

DATA_TYPES = [
    "SERIAL", "INTEGER", "BIGINT", "SMALLINT",
    "TEXT", "VARCHAR", "CHAR", "BOOLEAN",
    "TIMESTAMP", "DATE", "TIME",
    "NUMERIC", "DECIMAL", "REAL", "DOUBLE PRECISION",
    "JSON", "JSONB", "UUID",
]
AUTO_INCREMENT_TYPES = {"SERIAL", "INTEGER", "BIGINT"}
TEXTUAL_TYPES = {"TEXT", "VARCHAR", "CHAR"}
INTEGER_TYPES = {"INTEGER", "BIGINT", "SMALLINT"}
NUMERIC_TYPES = INTEGER_TYPES | {"NUMERIC", "DECIMAL", "REAL", "DOUBLE PRECISION"}
SQL_FUNCTION_DEFAULTS = {"CURRENT_TIMESTAMP", "CURRENT_DATE", "CURRENT_TIME", "NOW()", "GEN_RANDOM_UUID()"}

DEFAULT_LENGTH = 255
DEFAULT_PRECISION = (10, 2)

AUDIT_COLUMN_DDL = f"{AUDIT_COLUMN} TIMESTAMP DEFAULT CURRENT_TIMESTAMP"

# DDL carries literal text; keep the driver from treating % as a placeholder
NO_PARAMS = {"no_parameters": True}


# ── Validation ────────────────────────────────────────────────────────────────

def validate_table_definition(table_name: str, columns: list[ColumnSpec]) -> None:
    """Raise ValidationError for the first problem found in a table design."""
    if not table_name or not table_name.strip():
        raise ValidationError("Invalid table definition", "Table name is required")
    if not IDENTIFIER_RE.match(table_name):
        raise ValidationError(
            "Invalid table definition",
            "Table name must start with a letter or underscore and contain only letters, numbers, and underscores",
        )
    if len(columns) < 2:
        raise ValidationError("Invalid table definition", "Table must have at least 2 columns")

    pk_count = sum(1 for c in columns if c.is_primary_key)
    if pk_count == 0:
        raise ValidationError("Invalid table definition", "Table must have a primary key column")
    if pk_count > 1:
        raise ValidationError("Invalid table definition", "Composite primary keys are not supported")

    seen: set[str] = set()
    for col in columns:
        _validate_column(col)
        key = col.name.lower()
        if key in seen:
            raise ValidationError("Invalid table definition", f"Duplicate column name '{col.name}'")
        seen.add(key)


def _validate_column(col: ColumnSpec) -> None:
    if not col.name:
        raise ValidationError("Invalid table definition", "All columns must have names")
    if not IDENTIFIER_RE.match(col.name):
        raise ValidationError(
            "Invalid table definition",
            "Column names must start with a letter or underscore and contain only letters, numbers, and underscores",
        )
    if col.type not in DATA_TYPES:
        raise ValidationError("Invalid table definition", f"Unsupported type '{col.type}' for column '{col.name}'")
    if col.type in SIZED_TEXT_TYPES and (col.length is None or col.length <= 0):
        raise ValidationError(
            "Invalid table definition",
            f"{col.type} column '{col.name}' must specify a positive length",
        )
    if col.type in SCALED_NUMERIC_TYPES and col.precision is not None:
        if col.precision <= 0:
            raise ValidationError("Invalid table definition", f"Precision of '{col.name}' must be positive")
        if col.scale is not None and not 0 <= col.scale <= col.precision:
            raise ValidationError("Invalid table definition", f"Scale of '{col.name}' must be between 0 and its precision")
    if col.is_auto_increment and col.type not in AUTO_INCREMENT_TYPES:
        raise ValidationError(
            "Invalid table definition",
            f"Auto-increment is only available for {', '.join(sorted(AUTO_INCREMENT_TYPES))} columns",
        )
    if col.default_value is not None and col.default_value.strip().upper() not in SQL_FUNCTION_DEFAULTS:
        value = col.default_value.strip()
        if col.type in NUMERIC_TYPES:
            pattern = INTEGER_LITERAL_RE if col.type in INTEGER_TYPES else DECIMAL_LITERAL_RE
            if not pattern.match(value):
                raise ValidationError(
                    "Invalid table definition",
                    f"Default for '{col.name}' must be a plain number literal, got {value!r}",
                )
        elif col.type == "BOOLEAN" and value.lower() not in ("true", "false"):
            raise ValidationError(
                "Invalid table definition",
                f"Default for '{col.name}' must be true or false, got {value!r}",
            )


def check_dialect_support(columns: list[ColumnSpec], dialect: Dialect) -> None:
    """Reject designs the connected dialect cannot express."""
    if dialect.name != "sqlite":
        return
    for col in columns:
        generated = col.type == "SERIAL" or (col.is_auto_increment and col.type in ("INTEGER", "BIGINT"))
        if generated and not col.is_primary_key:
            raise ValidationError(
                "Invalid table definition",
                f"SQLite only auto-increments an INTEGER PRIMARY KEY; '{col.name}' is not the primary key",
            )


# ── DDL rendering ─────────────────────────────────────────────────────────────

def quote_literal(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def render_default(col: ColumnSpec) -> str:
    value = col.default_value.strip()
    if value.upper() in SQL_FUNCTION_DEFAULTS:
        return value
    if col.type in NUMERIC_TYPES:
        return value
    if col.type == "BOOLEAN":
        return value.lower()
    return quote_literal(value)


def render_type(col: ColumnSpec, dialect: Dialect) -> str:
    if col.type in SIZED_TEXT_TYPES:
        return f"{col.type}({col.length or DEFAULT_LENGTH})"
    if col.type in SCALED_NUMERIC_TYPES:
        if col.precision is None:
            return f"{col.type}({DEFAULT_PRECISION[0]},{DEFAULT_PRECISION[1]})"
        if col.scale is None:
            return f"{col.type}({col.precision})"
        return f"{col.type}({col.precision},{col.scale})"
    if dialect.name == "sqlite":
        # AUTOINCREMENT is only accepted on an INTEGER PRIMARY KEY
        if col.type == "SERIAL" or (col.is_auto_increment and col.is_primary_key):
            return "INTEGER"
    return col.type


def render_column(col: ColumnSpec, dialect: Dialect) -> str:
    """Render one column definition: name, type, constraints, identity or default."""
    parts = [dialect.identifier_preparer.quote(col.name), render_type(col, dialect)]
    if not col.is_nullable:
        parts.append("NOT NULL")
    if col.is_primary_key:
        parts.append("PRIMARY KEY")

    if col.is_auto_increment and col.type in ("INTEGER", "BIGINT"):
        if dialect.name == "sqlite":
            if col.is_primary_key:
                parts.append("AUTOINCREMENT")
        else:
            parts.append("GENERATED ALWAYS AS IDENTITY")
    elif col.default_value and col.type != "SERIAL" and not col.is_auto_increment:
        parts.append(f"DEFAULT {render_default(col)}")
    return " ".join(parts)


def render_create_table(
    table_name: str,
    columns: list[ColumnSpec],
    dialect: Dialect,
    schema: Optional[str] = None,
) -> str:
    prep = dialect.identifier_preparer
    qualified = f"{prep.quote(schema)}.{prep.quote(table_name)}" if schema else prep.quote(table_name)
    definitions = [render_column(c, dialect) for c in columns]
    # SQLite's ALTER TABLE cannot add a column whose default is CURRENT_TIMESTAMP
    if dialect.name == "sqlite" and not any(c.name == AUDIT_COLUMN for c in columns):
        definitions.append(AUDIT_COLUMN_DDL)
    body = ",\n  ".join(definitions)
    return f"CREATE TABLE {qualified} (\n  {body}\n)"


# ── Operations ────────────────────────────────────────────────────────────────

def create_table(engine: Engine, table_name: str, columns: list[ColumnSpec]) -> None:
    """
    Create `table_name` from `columns`, then make sure it has a `created_at`
    column defaulting to the current timestamp.
    """
    validate_table_definition(table_name, columns)
    check_dialect_support(columns, engine.dialect)
    if table_name in {t.table_name for t in list_tables(engine)}:
        raise ValidationError("Invalid table definition", f"Table '{table_name}' already exists")

    schema = get_default_schema(engine)
    ddl = render_create_table(table_name, columns, engine.dialect, schema)
    with transaction(engine, f"create table {table_name}") as conn:
        conn.exec_driver_sql(ddl, execution_options=NO_PARAMS)

    if not has_column(engine, table_name, AUDIT_COLUMN):
        qualified = qualified_name(engine, table_name)
        with transaction(engine, f"add {AUDIT_COLUMN} to {table_name}") as conn:
            conn.exec_driver_sql(f"ALTER TABLE {qualified} ADD COLUMN {AUDIT_COLUMN_DDL}", execution_options=NO_PARAMS)

    logger.info("Created table %s with %d columns", table_name, len(columns))


def delete_table(engine: Engine, table_name: str) -> None:
    """Drop `table_name` and, where the dialect supports it, everything depending on it."""
    require_table(engine, table_name)
    qualified = qualified_name(engine, table_name)
    cascade = "" if engine.dialect.name == "sqlite" else " CASCADE"
    with transaction(engine, f"drop table {table_name}") as conn:
        conn.exec_driver_sql(f"DROP TABLE {qualified}{cascade}", execution_options=NO_PARAMS)
    logger.info("Dropped table %s", table_name)
