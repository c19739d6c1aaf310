"""/api/tables/{table_name}/rows — generic row CRUD for any catalog table."""
from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.engine import Engine

from core.database import get_engine
from core.errors import NotFoundError
from core.row_service import delete_row, insert_row, list_rows, update_row
from models.column_spec import MessageResponse

router = APIRouter()


@router.get("/tables/{table_name}/data")
def get_table_data(table_name: str, engine: Engine = Depends(get_engine)) -> list[dict[str, Any]]:
    return list_rows(engine, table_name)


@router.post("/tables/{table_name}/rows")
def add_row(
    table_name: str,
    payload: dict[str, Any] = Body(...),
    engine: Engine = Depends(get_engine),
) -> dict[str, Any]:
    return insert_row(engine, table_name, payload)


@router.put("/tables/{table_name}/rows/{row_id}")
def edit_row(
    table_name: str,
    row_id: int,
    payload: dict[str, Any] = Body(...),
    engine: Engine = Depends(get_engine),
) -> dict[str, Any]:
    return update_row(engine, table_name, row_id, payload)


@router.delete("/tables/{table_name}/rows/{row_id}", response_model=MessageResponse)
def soft_delete(table_name: str, row_id: int, engine: Engine = Depends(get_engine)):
    return _delete(engine, table_name, row_id, hard=False)


@router.delete("/tables/{table_name}/rows/{row_id}/hard-delete", response_model=MessageResponse)
def hard_delete(table_name: str, row_id: int, engine: Engine = Depends(get_engine)):
    return _delete(engine, table_name, row_id, hard=True)


def _delete(engine: Engine, table_name: str, row_id: int, hard: bool) -> MessageResponse:
    if not delete_row(engine, table_name, row_id, hard=hard):
        raise NotFoundError("Row not found", f"No row with id {row_id} in '{table_name}'")
    return MessageResponse(message="Row deleted successfully")
