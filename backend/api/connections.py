"""/api/db-connections — connection registry, schema extraction and natural-language queries."""
import logging

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_store, get_generator
from core.connection_store import ConnectionStore
from core.db_connector import probe_connection
from core.errors import ValidationError
from core.nl_query import answer_question
from core.schema_assembler import extract_schema
from core.text_to_sql import SQLGenerator
from models.connection import ConnectionCreate, ConnectionParams, ConnectionSummary, ConnectionDetail, ConnectionPage
from models.query import QueryRequest

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/db-connections")
def list_connections(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder", pattern="^(asc|desc)$"),
    store: ConnectionStore = Depends(get_store),
):
    records, total = store.list(limit=limit, offset=offset, sort_by=sort_by, sort_order=sort_order)
    page = ConnectionPage(
        items=[ConnectionSummary.from_record(r) for r in records],
        total=total,
        limit=limit,
        offset=offset,
    )
    return {"data": page}


@router.post("/db-connections", status_code=201)
def create_connection(req: ConnectionCreate, store: ConnectionStore = Depends(get_store)):
    missing = req.missing_fields()
    if missing:
        raise ValidationError("name, host, database, username, and password are required")

    # Nothing is stored unless the target answers
    probe_connection(ConnectionParams(
        host=req.host.strip(),
        port=req.port,
        database=req.database.strip(),
        user=req.username.strip(),
        password=req.password,
        ssl_relaxed=req.ssl_relaxed,
    ))
    record = store.create(req)
    return {"data": ConnectionSummary.from_record(record)}


@router.get("/db-connections/{connection_id}")
def get_connection(connection_id: str, store: ConnectionStore = Depends(get_store)):
    return {"data": ConnectionDetail.from_record(store.get(connection_id))}


@router.delete("/db-connections/{connection_id}")
def delete_connection(connection_id: str, store: ConnectionStore = Depends(get_store)):
    store.delete(connection_id)
    return {"data": {"deleted": True}}


@router.post("/db-connections/{connection_id}/extract")
def extract(connection_id: str, store: ConnectionStore = Depends(get_store)):
    record = store.get(connection_id)
    schema = extract_schema(store.params_for(record))
    # Only a fully successful extraction replaces the cached snapshot
    store.set_schema(connection_id, schema)
    return {"data": schema}


@router.post("/db-connections/{connection_id}/query")
def query(
    connection_id: str,
    req: QueryRequest,
    store: ConnectionStore = Depends(get_store),
    generator: SQLGenerator = Depends(get_generator),
):
    question = req.query.strip()
    if not question:
        raise ValidationError("query is required")

    record = store.get(connection_id)
    response = answer_question(record, question, generator, store.params_for)
    return {"data": response}
