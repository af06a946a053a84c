"""Pydantic schemas for an extracted database schema snapshot.

Every model is frozen: a snapshot is produced once per extraction run and
replaced wholesale, never patched in place. Field names are snake_case in
Python and camelCase on the wire.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SnapshotModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class Column(SnapshotModel):
    name: str
    data_type: str
    udt_name: str                              # catalog type tag, e.g. "int4", "_text"
    is_nullable: bool = True
    column_default: Optional[str] = None
    character_max_length: Optional[int] = None
    numeric_precision: Optional[int] = None
    ordinal_position: int
    is_primary_key: bool = False
    is_foreign_key: bool = False
    is_unique: bool = False


class Table(SnapshotModel):
    name: str
    schema_name: str = Field("public", alias="schema")
    columns: list[Column] = Field(default_factory=list)
    estimated_row_count: int = 0               # planner statistic, may be stale


class Relationship(SnapshotModel):
    constraint_name: str
    source_table: str
    source_column: str
    target_table: str
    target_column: str
    update_rule: str
    delete_rule: str


class EnumType(SnapshotModel):
    name: str
    schema_name: str = Field("public", alias="schema")
    values: list[str] = Field(default_factory=list)   # catalog sort order


class Index(SnapshotModel):
    name: str
    table_name: str
    columns: list[str] = Field(default_factory=list)
    is_unique: bool = False
    is_primary: bool = False
    index_type: str = "btree"


class TypeProperty(SnapshotModel):
    name: str
    type: str
    is_optional: bool = False
    is_array: bool = False
    description: Optional[str] = None


class EntityType(SnapshotModel):
    name: str
    table_name: str
    properties: list[TypeProperty] = Field(default_factory=list)
    associated_tables: list[str] = Field(default_factory=list)


class ExtractedSchema(SnapshotModel):
    tables: list[Table] = Field(default_factory=list)
    relationships: list[Relationship] = Field(default_factory=list)
    enums: list[EnumType] = Field(default_factory=list)
    indexes: list[Index] = Field(default_factory=list)
    entity_types: list[EntityType] = Field(default_factory=list)
    extracted_at: datetime
