"""
Database connector — SQLAlchemy engine factories for target databases and the
reachability probe that gates storing a connection.
"""
import logging
from typing import Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import NullPool

from config import settings
from core.errors import ConnectivityError
from models.connection import ConnectionParams

logger = logging.getLogger(__name__)


def create_catalog_engine(params: ConnectionParams, pool_size: int) -> Engine:
    """Pooled engine sized so every catalog reader gets its own connection."""
    return create_engine(
        params.get_sqlalchemy_url(),
        pool_size=pool_size,
        max_overflow=0,
        pool_pre_ping=True,
        connect_args=params.get_connect_args(),
    )


def create_single_use_engine(params: ConnectionParams, timeout: Optional[int] = None) -> Engine:
    """Engine that opens a fresh connection on checkout and closes it on release."""
    return create_engine(
        params.get_sqlalchemy_url(),
        poolclass=NullPool,
        connect_args=params.get_connect_args(timeout),
    )


def probe_connection(params: ConnectionParams, timeout: Optional[int] = None) -> None:
    """Open a connection, run a trivial round-trip and close it.

    Raises ConnectivityError when the target cannot be reached within *timeout*
    seconds or rejects the credentials.
    """
    timeout = timeout or settings.PROBE_TIMEOUT_SECONDS
    engine = create_single_use_engine(params, timeout=timeout)
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        message = _driver_message(e)
        logger.warning("Probe of %s:%s/%s failed: %s", params.host, params.port, params.database, message)
        raise ConnectivityError(f"Could not connect: {message}") from e
    finally:
        engine.dispose()
    logger.info("Probe of %s:%s/%s succeeded", params.host, params.port, params.database)


def _driver_message(e: Exception) -> str:
    """Underlying DBAPI message without SQLAlchemy's statement/background decoration."""
    orig = getattr(e, "orig", None)
    return str(orig or e).strip()
