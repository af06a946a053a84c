"""
SQL safety gate — lexical check standing between generated SQL and execution.

Rejects any statement containing a whole-word, case-insensitive match of a
write/DDL/privilege keyword. This is not a parser: a keyword inside a string
literal or identifier is rejected too, but no listed keyword ever slips through.
"""
import re

from models.query import SafetyResult

DISALLOWED_KEYWORDS = (
    "INSERT", "UPDATE", "DELETE", "DROP", "ALTER", "TRUNCATE",
    "CREATE", "GRANT", "REVOKE", "EXECUTE", "EXEC",
)

UNSAFE_PATTERN = re.compile(r"\b(" + "|".join(DISALLOWED_KEYWORDS) + r")\b", re.IGNORECASE)


def validate_sql_safety(sql: str) -> SafetyResult:
    match = UNSAFE_PATTERN.search(sql)
    if match:
        return SafetyResult(
            safe=False,
            reason=f"Query contains disallowed keyword: {match.group(0)}",
            keyword=match.group(0),
        )
    return SafetyResult(safe=True)
