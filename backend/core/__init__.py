from core.db_connector import probe_connection  # noqa: F401
from core.schema_assembler import extract_schema  # noqa: F401
from core.type_inferencer import infer_entity_types  # noqa: F401
from core.prompt_builder import build_schema_summary  # noqa: F401
from core.text_to_sql import SQLGenerator  # noqa: F401
from core.sql_safety import validate_sql_safety  # noqa: F401
from core.query_executor import execute_read_only  # noqa: F401
from core.nl_query import answer_question  # noqa: F401
