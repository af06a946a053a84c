"""Error taxonomy shared by the extraction and query pipelines."""
from enum import Enum
from typing import Optional


class ErrorCode(Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONNECTION_FAILED = "CONNECTION_FAILED"
    EXTRACTION_FAILED = "EXTRACTION_FAILED"
    PRECONDITION_FAILED = "PRECONDITION_FAILED"
    AI_ERROR = "AI_ERROR"
    UNSAFE_SQL = "UNSAFE_SQL"
    QUERY_ERROR = "QUERY_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


HTTP_STATUS = {
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.CONNECTION_FAILED: 422,
    ErrorCode.EXTRACTION_FAILED: 422,
    ErrorCode.PRECONDITION_FAILED: 412,
    ErrorCode.AI_ERROR: 422,
    ErrorCode.UNSAFE_SQL: 403,
    ErrorCode.QUERY_ERROR: 422,
    ErrorCode.INTERNAL_ERROR: 500,
}


class SchemaScopeError(Exception):
    code = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, details: Optional[str] = None):
        self.message = message
        self.details = details
        super().__init__(f"{self.code.value}: {message}")

    @property
    def status(self) -> int:
        return HTTP_STATUS[self.code]


class ValidationError(SchemaScopeError):
    code = ErrorCode.VALIDATION_ERROR


class NotFoundError(SchemaScopeError):
    code = ErrorCode.NOT_FOUND


class ConnectivityError(SchemaScopeError):
    """The target database could not be reached."""
    code = ErrorCode.CONNECTION_FAILED


class ExtractionError(SchemaScopeError):
    """One of the catalog reads failed; no snapshot was produced."""
    code = ErrorCode.EXTRACTION_FAILED


class PreconditionError(SchemaScopeError):
    code = ErrorCode.PRECONDITION_FAILED


class GenerationError(SchemaScopeError):
    """The language-model backend failed or returned something unparsable."""
    code = ErrorCode.AI_ERROR


class AIUnavailableError(GenerationError):
    """No backend credential is configured."""


class UnsafeSQLError(SchemaScopeError):
    code = ErrorCode.UNSAFE_SQL

    def __init__(self, message: str, keyword: str):
        self.keyword = keyword
        super().__init__(message)


class QueryExecutionError(SchemaScopeError):
    """A statement that passed the safety gate failed on the target database."""
    code = ErrorCode.QUERY_ERROR
