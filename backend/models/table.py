"""Pydantic schemas for table and column metadata read from the catalog."""
from typing import Optional
from pydantic import BaseModel


class TableDescriptor(BaseModel):
    table_name: str
    table_schema: str


class ColumnDescriptor(BaseModel):
    column_name: str
    data_type: str
    is_nullable: bool = True
    column_default: Optional[str] = None
    is_primary_key: bool = False
    max_length: Optional[int] = None      # declared character length, if any
    input_type: str = "text"              # text | number | checkbox | datetime-local | select
