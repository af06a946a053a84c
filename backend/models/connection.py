"""Pydantic schemas for database connection requests and records."""
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from sqlalchemy.engine import URL

from models.schema import ExtractedSchema


class ConnectionParams(BaseModel):
    """Everything needed to open a connection to one target PostgreSQL database."""
    host: str
    port: int = 5432
    database: str
    user: str
    password: str
    ssl_relaxed: bool = False    # TLS without certificate verification

    def get_sqlalchemy_url(self) -> URL:
        # URL.create escapes special characters in the password
        return URL.create(
            "postgresql+psycopg2",
            username=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.database,
        )

    def get_connect_args(self, timeout: Optional[int] = None) -> dict:
        args: dict = {}
        if self.ssl_relaxed:
            args["sslmode"] = "require"
        if timeout is not None:
            args["connect_timeout"] = timeout
        return args


class ConnectionCreate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str = Field("", description="Display name for this connection")
    host: str = Field("", description="Database host")
    port: int = Field(5432, description="Database port")
    database: str = Field("", description="Database name")
    username: str = Field("", description="Username")
    password: str = Field("", description="Password (encrypted before it is stored)")
    ssl_relaxed: bool = Field(False, description="Use TLS without verifying the server certificate")

    def missing_fields(self) -> list[str]:
        return [f for f in ("name", "host", "database", "username", "password") if not getattr(self, f).strip()]


class ConnectionRecord(BaseModel):
    """A stored connection. The password only ever lives here encrypted."""
    id: str = Field(default_factory=lambda: uuid4().hex)
    name: str
    host: str
    port: int
    database: str
    username: str
    encrypted_password: str
    ssl_relaxed: bool = False
    cached_schema: Optional[ExtractedSchema] = None
    last_extracted_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ConnectionSummary(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    host: str
    port: int
    database_name: str
    username: str
    last_extracted_at: Optional[datetime] = None
    created_at: datetime

    @classmethod
    def from_record(cls, record: ConnectionRecord) -> "ConnectionSummary":
        return cls(
            id=record.id,
            name=record.name,
            host=record.host,
            port=record.port,
            database_name=record.database,
            username=record.username,
            last_extracted_at=record.last_extracted_at,
            created_at=record.created_at,
        )


class ConnectionDetail(ConnectionSummary):
    cached_schema: Optional[ExtractedSchema] = None

    @classmethod
    def from_record(cls, record: ConnectionRecord) -> "ConnectionDetail":
        summary = ConnectionSummary.from_record(record)
        return cls(**summary.model_dump(), cached_schema=record.cached_schema)


class ConnectionPage(BaseModel):
    items: list[ConnectionSummary]
    total: int
    limit: int
    offset: int
