"""
SchemaScope — schema introspection and guarded text-to-SQL for external PostgreSQL databases.
FastAPI application entry point.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api import health, connections
from config import settings
from core.connection_store import ConnectionStore
from core.credentials import CredentialCipher
from core.errors import SchemaScopeError, ErrorCode, HTTP_STATUS
from core.text_to_sql import SQLGenerator
from integrations.llm_client import LLMClient

# ── Logging ──────────────────────────────────────────────────────────────────
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)
logger = logging.getLogger("schemascope")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("SchemaScope starting up…")
    llm_client = LLMClient(settings)
    app.state.llm_client = llm_client
    app.state.sql_generator = SQLGenerator(llm_client)
    app.state.connection_store = ConnectionStore(CredentialCipher())
    if not llm_client.enabled:
        logger.warning("LLM_API_KEY not set; natural-language queries are disabled")
    yield
    logger.info("SchemaScope shutting down.")


# ── App ───────────────────────────────────────────────────────────────────────
app = FastAPI(
    title="SchemaScope",
    description="Schema extraction, entity type inference and read-only text-to-SQL for external databases.",
    version="1.0.0",
    lifespan=lifespan,
)

# ── CORS ──────────────────────────────────────────────────────────────────────
origins = [o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Errors ────────────────────────────────────────────────────────────────────
def _error_response(code: ErrorCode, message: str) -> JSONResponse:
    status = HTTP_STATUS[code]
    return JSONResponse(
        status_code=status,
        content={"error": {"code": code.value, "message": message, "status": status}},
    )


@app.exception_handler(SchemaScopeError)
async def schemascope_error_handler(request: Request, exc: SchemaScopeError):
    return _error_response(exc.code, exc.message)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("%s %s failed", request.method, request.url.path)
    return _error_response(ErrorCode.INTERNAL_ERROR, "Internal server error")


# ── Routers ───────────────────────────────────────────────────────────────────
app.include_router(health.router,      prefix="/api")
app.include_router(connections.router, prefix="/api")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=settings.API_HOST, port=settings.API_PORT)
