"""Pydantic schemas for the natural-language query API."""
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class QueryRequest(BaseModel):
    query: str = ""


class GeneratedSQL(BaseModel):
    sql: str
    explanation: str


class SafetyResult(BaseModel):
    safe: bool
    reason: Optional[str] = None
    keyword: Optional[str] = None    # the disallowed word as it appeared in the SQL


class QueryResult(BaseModel):
    """Tabular result of one read-only statement. Row values are driver values, untouched."""
    columns: list[str]
    rows: list[dict[str, Any]]
    row_count: int


class QueryResponse(BaseModel):
    # binary cells go over the wire as base64
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, ser_json_bytes="base64")

    sql: str
    explanation: str
    columns: list[str]
    rows: list[dict[str, Any]]
    row_count: int

    @field_validator("rows")
    @classmethod
    def memoryview_to_bytes(cls, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        # psycopg2 hands bytea back as memoryview, which has no JSON form
        return [
            {k: bytes(v) if isinstance(v, memoryview) else v for k, v in row.items()}
            for row in rows
        ]
