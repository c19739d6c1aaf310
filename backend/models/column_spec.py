"""Pydantic schemas for the create-table request."""
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

SIZED_TEXT_TYPES = {"VARCHAR", "CHAR"}
SCALED_NUMERIC_TYPES = {"NUMERIC", "DECIMAL"}


def _lookup(data: dict, snake: str) -> Any:
    return data.get(snake, data.get(to_camel(snake)))


class ColumnSpec(BaseModel):
    """
    One column of a table to create.

    Sizing lives in its own typed fields: `length` for VARCHAR/CHAR and
    `precision`/`scale` for NUMERIC/DECIMAL. Older clients send the size in
    `defaultValue` for those types; that shape is translated on input so
    `default_value` only ever holds a default.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str
    type: str
    is_nullable: bool = True
    is_primary_key: bool = False
    is_auto_increment: bool = False
    default_value: Optional[str] = None
    length: Optional[int] = None
    precision: Optional[int] = None
    scale: Optional[int] = None

    @model_validator(mode="before")
    @classmethod
    def _translate_sizing(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        col_type = " ".join(str(_lookup(data, "type") or "").upper().split())
        raw = _lookup(data, "default_value")
        overloaded = str(raw).strip() if raw is not None else ""

        if col_type in SIZED_TEXT_TYPES and _lookup(data, "length") is None:
            if overloaded:
                data["length"] = overloaded
            data.pop("defaultValue", None)
            data.pop("default_value", None)
        elif col_type in SCALED_NUMERIC_TYPES and _lookup(data, "precision") is None:
            if overloaded:
                parts = [p.strip() for p in overloaded.split(",")]
                data["precision"] = parts[0]
                if len(parts) > 1:
                    data["scale"] = parts[1]
            data.pop("defaultValue", None)
            data.pop("default_value", None)
        elif raw is not None and not isinstance(raw, str):
            data.pop("defaultValue", None)
            data["default_value"] = str(raw).lower() if isinstance(raw, bool) else str(raw)
        return data

    @field_validator("type")
    @classmethod
    def _normalise_type(cls, v: str) -> str:
        return " ".join(v.upper().split())

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        return v.strip()

    @field_validator("default_value")
    @classmethod
    def _blank_default_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v


class CreateTableRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    table_name: str
    columns: list[ColumnSpec] = Field(default_factory=list)


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str
    details: str = ""
