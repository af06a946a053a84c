import pytest

from core.sql_safety import validate_sql_safety, DISALLOWED_KEYWORDS


@pytest.mark.parametrize("sql", [
    "SELECT * FROM users",
    "SELECT u.name, COUNT(*) FROM users u GROUP BY u.name",
    "SELECT * FROM users WHERE id IN (SELECT user_id FROM posts)",
    "WITH recent AS (SELECT * FROM posts ORDER BY id DESC LIMIT 10) SELECT * FROM recent",
    "SELECT p.id, u.name FROM posts p JOIN users u ON u.id = p.user_id WHERE u.name LIKE '%a%'",
    "SELECT created_at, updated_at, deleted FROM audit_log",
])
def test_reads_pass(sql):
    result = validate_sql_safety(sql)
    assert result.safe is True
    assert result.reason is None


@pytest.mark.parametrize("keyword", DISALLOWED_KEYWORDS)
def test_each_keyword_rejected(keyword):
    result = validate_sql_safety(f"{keyword} something")
    assert result.safe is False
    assert keyword in result.reason
    assert result.keyword == keyword


def test_case_insensitive():
    assert validate_sql_safety("insert into users values (1)").safe is False
    result = validate_sql_safety("Drop Table users")
    assert result.safe is False
    assert "Drop" in result.reason


def test_piggybacked_statement_rejected():
    result = validate_sql_safety("SELECT * FROM users; DROP TABLE users;")
    assert result.safe is False
    assert result.keyword == "DROP"
    assert result.reason == "Query contains disallowed keyword: DROP"


def test_first_match_is_reported():
    result = validate_sql_safety("SELECT 1; DELETE FROM a; INSERT INTO b VALUES (1)")
    assert result.keyword == "DELETE"


def test_keyword_in_string_literal_is_rejected():
    # lexical check: false positives are accepted behaviour
    assert validate_sql_safety("SELECT * FROM logs WHERE action = 'delete'").safe is False
