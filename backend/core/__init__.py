from core.database import get_engine, build_engine, transaction  # noqa: F401
from core.errors import PanelError, QueryError, NotFoundError, ValidationError  # noqa: F401
from core.introspector import list_tables, describe_table  # noqa: F401
from core.row_service import list_rows, insert_row, update_row, delete_row  # noqa: F401
from core.table_service import create_table, delete_table  # noqa: F401
