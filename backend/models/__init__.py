from models.schema import Column, Table, Relationship, EnumType, Index, TypeProperty, EntityType, ExtractedSchema  # noqa: F401
from models.connection import ConnectionParams, ConnectionCreate, ConnectionRecord, ConnectionSummary  # noqa: F401
from models.query import QueryRequest, GeneratedSQL, SafetyResult, QueryResult, QueryResponse  # noqa: F401
