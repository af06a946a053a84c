"""
In-memory registry of target database connections and their cached schema
snapshots.

A record is only created after its parameters pass the probe. Snapshots are
replaced wholesale; concurrent refreshes resolve last-write-wins.
"""
import logging
import threading
from datetime import datetime, timezone
from typing import Optional

from core.credentials import CredentialCipher
from core.errors import NotFoundError
from models.connection import ConnectionCreate, ConnectionParams, ConnectionRecord
from models.schema import ExtractedSchema

logger = logging.getLogger(__name__)

SORT_FIELDS = {"name": "name", "createdAt": "created_at"}


class ConnectionStore:
    def __init__(self, cipher: CredentialCipher):
        self.cipher = cipher
        self._records: dict[str, ConnectionRecord] = {}
        self._lock = threading.Lock()

    def create(self, req: ConnectionCreate) -> ConnectionRecord:
        record = ConnectionRecord(
            name=req.name.strip(),
            host=req.host.strip(),
            port=req.port,
            database=req.database.strip(),
            username=req.username.strip(),
            encrypted_password=self.cipher.encrypt(req.password),
            ssl_relaxed=req.ssl_relaxed,
        )
        with self._lock:
            self._records[record.id] = record
        logger.info("Stored connection %s (%s@%s/%s)", record.id, record.username, record.host, record.database)
        return record

    def get(self, connection_id: str) -> ConnectionRecord:
        with self._lock:
            record = self._records.get(connection_id)
        if record is None:
            raise NotFoundError("Connection not found")
        return record

    def list(
        self,
        limit: int = 50,
        offset: int = 0,
        sort_by: str = "createdAt",
        sort_order: str = "desc",
    ) -> tuple[list[ConnectionRecord], int]:
        field = SORT_FIELDS.get(sort_by, "created_at")
        with self._lock:
            records = list(self._records.values())
        records.sort(key=lambda r: getattr(r, field), reverse=sort_order == "desc")
        return records[offset:offset + limit], len(records)

    def delete(self, connection_id: str) -> None:
        with self._lock:
            if self._records.pop(connection_id, None) is None:
                raise NotFoundError("Connection not found")
        logger.info("Deleted connection %s", connection_id)

    def set_schema(self, connection_id: str, schema: ExtractedSchema) -> ConnectionRecord:
        with self._lock:
            record = self._records.get(connection_id)
            if record is None:
                raise NotFoundError("Connection not found")
            updated = record.model_copy(update={
                "cached_schema": schema,
                "last_extracted_at": datetime.now(timezone.utc),
            })
            self._records[connection_id] = updated
        return updated

    def params_for(self, record: ConnectionRecord) -> ConnectionParams:
        """Connection parameters with the password decrypted; never store the result."""
        return ConnectionParams(
            host=record.host,
            port=record.port,
            database=record.database,
            user=record.username,
            password=self.cipher.decrypt(record.encrypted_password),
            ssl_relaxed=record.ssl_relaxed,
        )
