from datetime import datetime, timezone

from core.prompt_builder import build_schema_summary
from models.schema import ExtractedSchema


def test_summary_contains_tables_enums_and_relationships(blog_schema):
    summary = build_schema_summary(blog_schema)

    assert "TABLE users:" in summary
    assert "  id uuid [PK, NOT NULL]" in summary
    assert "  user_id uuid [FK, NOT NULL]" in summary
    assert "ENUMS:" in summary
    assert "  post_status: pending, active, closed" in summary
    assert "RELATIONSHIPS:" in summary
    assert "  posts.user_id -> users.id" in summary


def test_column_without_flags_has_no_brackets(blog_schema):
    lines = build_schema_summary(blog_schema).splitlines()
    assert "  name varchar" in lines
    assert not any("[]" in line for line in lines)


def test_enum_values_not_alphabetized(blog_schema):
    summary = build_schema_summary(blog_schema)
    assert "pending, active, closed" in summary
    assert "active, closed, pending" not in summary


def test_empty_schema_is_empty_string():
    empty = ExtractedSchema(extracted_at=datetime(2024, 1, 1, tzinfo=timezone.utc))
    assert build_schema_summary(empty) == ""


def test_sections_omitted_when_empty(blog_schema):
    tables_only = blog_schema.model_copy(update={"enums": [], "relationships": []})
    summary = build_schema_summary(tables_only)
    assert "ENUMS:" not in summary
    assert "RELATIONSHIPS:" not in summary
    assert summary.startswith("TABLE posts:") or summary.startswith("TABLE users:")
