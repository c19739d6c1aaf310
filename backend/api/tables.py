"""/api/tables — catalog listing, column schema, table create and drop."""
from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.engine import Engine

from core.database import get_engine
from core.introspector import describe_table, initial_row, list_tables, require_table
from core.table_service import create_table, delete_table
from models.column_spec import CreateTableRequest, MessageResponse
from models.table import ColumnDescriptor, TableDescriptor

router = APIRouter()


@router.get("/tables", response_model=list[TableDescriptor])
def get_tables(engine: Engine = Depends(get_engine)):
    return list_tables(engine)


@router.get("/tables/{table_name}/schema", response_model=list[ColumnDescriptor])
def get_table_schema(table_name: str, engine: Engine = Depends(get_engine)):
    columns = describe_table(engine, table_name)
    if not columns:
        # empty result: either an unknown table (404) or a table with no columns
        require_table(engine, table_name)
    return columns


@router.get("/tables/{table_name}/template")
def get_row_template(table_name: str, engine: Engine = Depends(get_engine)) -> dict[str, Any]:
    """Blank new-row values the grid starts from."""
    require_table(engine, table_name)
    return initial_row(describe_table(engine, table_name))


@router.post("/tables/create", response_model=MessageResponse)
def post_create_table(req: CreateTableRequest, engine: Engine = Depends(get_engine)):
    create_table(engine, req.table_name, req.columns)
    return MessageResponse(message=f'Table "{req.table_name}" created successfully')


@router.delete("/tables/{table_name}", response_model=MessageResponse)
def remove_table(table_name: str, engine: Engine = Depends(get_engine)):
    delete_table(engine, table_name)
    return MessageResponse(message=f'Table "{table_name}" deleted successfully')
