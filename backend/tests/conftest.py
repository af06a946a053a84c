import os
import sys

# Add the parent directory (backend) to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from cryptography.fernet import Fernet
from fastapi.testclient import TestClient

from main import app
from api.dependencies import get_store, get_generator, get_llm_client
from core.connection_store import ConnectionStore
from core.credentials import CredentialCipher
from models.schema import Column, Table, Relationship, EnumType, Index, ExtractedSchema


def make_column(name, udt_name, ordinal, nullable=True, pk=False, fk=False, unique=False, data_type=None):
    return Column(
        name=name,
        data_type=data_type or udt_name,
        udt_name=udt_name,
        is_nullable=nullable,
        ordinal_position=ordinal,
        is_primary_key=pk,
        is_foreign_key=fk,
        is_unique=unique,
    )


class FakeResult:
    """Stands in for a SQLAlchemy CursorResult: only .mappings().all() is used."""

    def __init__(self, rows):
        self._rows = rows

    def mappings(self):
        return self

    def all(self):
        return list(self._rows)


def fake_connection(*row_sets):
    """A connection whose successive execute() calls return the given row sets."""
    conn = MagicMock()
    conn.execute.side_effect = [FakeResult(rows) for rows in row_sets]
    return conn


@pytest.fixture
def blog_tables():
    return [
        Table(name="users", schema="public", estimated_row_count=100, columns=[
            make_column("id", "uuid", 1, nullable=False, pk=True),
            make_column("name", "varchar", 2, data_type="character varying"),
        ]),
        Table(name="posts", schema="public", estimated_row_count=500, columns=[
            make_column("id", "uuid", 1, nullable=False, pk=True),
            make_column("user_id", "uuid", 2, nullable=False, fk=True),
        ]),
    ]


@pytest.fixture
def blog_relationships():
    return [
        Relationship(
            constraint_name="fk_posts_user",
            source_table="posts",
            source_column="user_id",
            target_table="users",
            target_column="id",
            update_rule="NO ACTION",
            delete_rule="CASCADE",
        ),
    ]


@pytest.fixture
def blog_schema(blog_tables, blog_relationships):
    return ExtractedSchema(
        tables=blog_tables,
        relationships=blog_relationships,
        enums=[EnumType(name="post_status", schema="public", values=["pending", "active", "closed"])],
        indexes=[Index(name="users_pkey", table_name="users", columns=["id"], is_unique=True, is_primary=True)],
        entity_types=[],
        extracted_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def store():
    return ConnectionStore(CredentialCipher(Fernet.generate_key().decode()))


@pytest.fixture
def generator():
    return MagicMock()


@pytest.fixture
def llm_client():
    llm = MagicMock()
    llm.enabled = True
    llm.base_url = "http://llm.test/v1"
    llm.is_healthy.return_value = (True, "test-model")
    return llm


@pytest.fixture
def client(store, generator, llm_client):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_generator] = lambda: generator
    app.dependency_overrides[get_llm_client] = lambda: llm_client
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
