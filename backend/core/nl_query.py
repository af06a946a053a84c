"""
Natural-language query pipeline: cached schema → generated SQL → safety gate
→ read-only execution.
"""
import logging
from typing import Callable

from core.errors import PreconditionError, UnsafeSQLError
from core.query_executor import execute_read_only
from core.sql_safety import validate_sql_safety
from core.text_to_sql import SQLGenerator
from models.connection import ConnectionParams, ConnectionRecord
from models.query import QueryResponse

logger = logging.getLogger(__name__)


def answer_question(
    record: ConnectionRecord,
    question: str,
    generator: SQLGenerator,
    resolve_params: Callable[[ConnectionRecord], ConnectionParams],
) -> QueryResponse:
    """Answer *question* against the database behind *record*.

    Parameters are resolved (and the password decrypted) only once the
    statement has passed the safety gate.
    """
    if record.cached_schema is None:
        raise PreconditionError("Schema must be extracted first. POST to /extract before querying.")

    generated = generator.generate(record.cached_schema, question)

    safety = validate_sql_safety(generated.sql)
    if not safety.safe:
        logger.warning("Rejected generated SQL for connection %s: %s", record.id, safety.reason)
        raise UnsafeSQLError(safety.reason or "Query is not safe to execute", keyword=safety.keyword or "")

    result = execute_read_only(resolve_params(record), generated.sql)
    return QueryResponse(
        sql=generated.sql,
        explanation=generated.explanation,
        columns=result.columns,
        rows=result.rows,
        row_count=result.row_count,
    )
