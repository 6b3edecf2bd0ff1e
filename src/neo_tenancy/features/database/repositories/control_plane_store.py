"""Asyncpg-backed unit of work over the control-plane database."""

import json
import logging
from contextlib import asynccontextmanager
from typing import Any, Awaitable, Callable, TypeVar

import asyncpg

from ....config.settings import TenancySettings
from ....core.exceptions import NeoTenancyError, TransactionError
from ..entities.database_protocols import ControlPlaneStore
from ..utils.connection_factory import ConnectionFactory
from ..utils.error_handling import format_database_error
from ..utils.queries import CONTROL_PLANE_SCHEMA

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def _init_connection(conn: asyncpg.Connection) -> None:
    """Decode JSONB columns to Python objects."""
    await conn.set_type_codec(
        "jsonb",
        encoder=json.dumps,
        decoder=json.loads,
        schema="pg_catalog",
    )


class AsyncpgControlPlaneStore(ControlPlaneStore):
    """Control-plane store over an asyncpg pool.

    Each ``run_in_transaction`` call acquires one pooled connection and
    wraps ``work`` in a single transaction. Domain errors raised by
    ``work`` propagate unchanged after rollback; driver errors become
    TransactionError.
    """

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    @classmethod
    async def create(cls, settings: TenancySettings) -> "AsyncpgControlPlaneStore":
        """Create the pool described by settings."""
        logger.info(f"Creating control-plane pool with size {settings.db_pool_max_size}")
        pool = await ConnectionFactory.create_pool(
            settings.control_plane_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
            command_timeout=settings.db_command_timeout,
            init=_init_connection,
            server_settings={"application_name": settings.app_name},
        )
        return cls(pool)

    @asynccontextmanager
    async def connection(self):
        async with self._pool.acquire() as conn:
            yield conn

    async def run_in_transaction(self, work: Callable[[Any], Awaitable[T]]) -> T:
        async with self._pool.acquire() as conn:
            try:
                async with conn.transaction():
                    return await work(conn)
            except NeoTenancyError:
                raise
            except asyncpg.PostgresError as e:
                message = format_database_error("commit control-plane transaction", e)
                logger.error(message)
                raise TransactionError(message, details={"sqlstate": e.sqlstate}) from e

    async def ensure_schema(self) -> None:
        """Apply the control-plane DDL. Every statement is guarded."""
        async with self._pool.acquire() as conn:
            async with conn.transaction():
                await conn.execute(CONTROL_PLANE_SCHEMA)
        logger.info("Control-plane schema ensured")

    async def close(self) -> None:
        """Close the connection pool."""
        await self._pool.close()
        logger.info("Control-plane pool closed")
