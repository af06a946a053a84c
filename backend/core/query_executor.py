"""
Query executor — runs one gated statement against a target database inside a
read-only transaction on a dedicated, single-use connection.
"""
import logging

from sqlalchemy.exc import SQLAlchemyError

from core.db_connector import create_single_use_engine, _driver_message
from core.errors import QueryExecutionError
from models.connection import ConnectionParams
from models.query import QueryResult

logger = logging.getLogger(__name__)


def execute_read_only(params: ConnectionParams, sql: str) -> QueryResult:
    """Execute *sql* verbatim in a READ ONLY transaction and return every row.

    Callers must have passed *sql* through the safety gate first; the
    read-only transaction is a second line of defence, not the only one.
    """
    engine = create_single_use_engine(params)
    try:
        with engine.connect() as conn:
            trans = conn.begin()
            try:
                conn.exec_driver_sql("SET TRANSACTION READ ONLY")
                # no_parameters: hand the text to the driver untouched ("%" and ":" included)
                result = conn.execution_options(no_parameters=True).exec_driver_sql(sql)
                columns = list(result.keys()) if result.returns_rows else []
                rows = [dict(row) for row in result.mappings()] if result.returns_rows else []
                trans.commit()
            except SQLAlchemyError as e:
                try:
                    trans.rollback()
                except SQLAlchemyError as rollback_err:
                    # the connection is discarded right after
                    logger.debug("Rollback failed: %s", rollback_err)
                message = _driver_message(e)
                logger.warning("Query failed on %s: %s", params.database, message)
                raise QueryExecutionError(message) from e
    except SQLAlchemyError as e:
        raise QueryExecutionError(_driver_message(e)) from e
    finally:
        engine.dispose()

    logger.info("Query on %s returned %d rows", params.database, len(rows))
    return QueryResult(columns=columns, rows=rows, row_count=len(rows))
