"""
Schema assembler — runs the four catalog readers side by side and fans their
results into one immutable snapshot.

Extraction is all-or-nothing: the first reader failure cancels the rest and
surfaces as ExtractionError; nothing partial is ever returned.
"""
import logging
import time
from concurrent.futures import ThreadPoolExecutor, FIRST_EXCEPTION, wait
from datetime import datetime, timezone
from typing import Callable, Optional

from config import settings
from core.catalog_reader import read_tables, read_relationships, read_enums, read_indexes
from core.db_connector import create_catalog_engine, _driver_message
from core.type_inferencer import infer_entity_types
from models.connection import ConnectionParams
from models.schema import ExtractedSchema
from core.errors import ExtractionError

logger = logging.getLogger(__name__)

READERS: dict[str, Callable] = {
    "tables": read_tables,
    "relationships": read_relationships,
    "enums": read_enums,
    "indexes": read_indexes,
}


def _run_reader(engine, reader: Callable, schema: str):
    with engine.connect() as conn:
        return reader(conn, schema)


def extract_schema(params: ConnectionParams, schema: Optional[str] = None) -> ExtractedSchema:
    """Read the target catalog and return a fresh snapshot with inferred entity types."""
    schema = schema or settings.CATALOG_SCHEMA
    t0 = time.time()
    engine = create_catalog_engine(params, pool_size=len(READERS))
    try:
        with ThreadPoolExecutor(max_workers=len(READERS), thread_name_prefix="catalog") as pool:
            futures = {
                pool.submit(_run_reader, engine, reader, schema): name
                for name, reader in READERS.items()
            }
            done, pending = wait(futures, return_when=FIRST_EXCEPTION)
            failed = next((f for f in done if f.exception() is not None), None)
            if failed is not None:
                for f in pending:
                    f.cancel()
                err = failed.exception()
                message = _driver_message(err)
                logger.warning("Catalog read '%s' failed for %s: %s", futures[failed], params.database, message)
                raise ExtractionError(f"Schema extraction failed: {message}") from err
            results = {futures[f]: f.result() for f in done}
    finally:
        engine.dispose()

    entity_types = infer_entity_types(results["tables"], results["relationships"], results["enums"])
    snapshot = ExtractedSchema(
        tables=results["tables"],
        relationships=results["relationships"],
        enums=results["enums"],
        indexes=results["indexes"],
        entity_types=entity_types,
        extracted_at=datetime.now(timezone.utc),
    )
    logger.info(
        "Extracted %d tables, %d relationships, %d enums, %d indexes from %s in %.2fs",
        len(snapshot.tables), len(snapshot.relationships), len(snapshot.enums),
        len(snapshot.indexes), params.database, time.time() - t0,
    )
    return snapshot
