"""Connection probe implementation."""

import asyncio
import logging
import time
from typing import Optional

import asyncpg

from ....config.constants import ProbeDefaults
from ..entities.connection_target import ConnectionTarget, ProbeResult
from ..entities.database_protocols import ConnectionProbe
from ..utils.error_handling import describe_connection_error

logger = logging.getLogger(__name__)


class AsyncpgConnectionProbe(ConnectionProbe):
    """Open a short-lived connection, run ``SELECT 1``, close it.

    Both the connect and the query are bounded. Every failure, including
    timeouts, becomes ``reachable=False`` with redacted detail.
    """

    LIVENESS_QUERY = "SELECT 1"

    def __init__(self,
                 connect_timeout: float = ProbeDefaults.CONNECT_TIMEOUT,
                 query_timeout: float = ProbeDefaults.QUERY_TIMEOUT):
        self.connect_timeout = connect_timeout
        self.query_timeout = query_timeout

    async def probe(self, target: ConnectionTarget) -> ProbeResult:
        started = time.perf_counter()

        if not target.is_configured:
            return ProbeResult(
                reachable=False,
                latency_ms=0.0,
                error_detail="not_configured: no database connection details supplied",
            )

        conn: Optional[asyncpg.Connection] = None
        timeout = self.connect_timeout
        try:
            conn = await asyncio.wait_for(
                asyncpg.connect(**target.connect_kwargs()),
                timeout=self.connect_timeout
            )
            timeout = self.query_timeout
            await asyncio.wait_for(
                conn.fetchval(self.LIVENESS_QUERY),
                timeout=self.query_timeout
            )
        except Exception as e:
            detail = describe_connection_error(e, target.secrets, timeout)
            logger.warning(f"Probe failed for {target.safe_dsn}: {detail}")
            return ProbeResult(
                reachable=False,
                latency_ms=(time.perf_counter() - started) * 1000,
                error_detail=detail,
            )
        finally:
            if conn is not None:
                await self._close_quietly(conn, target)

        latency_ms = (time.perf_counter() - started) * 1000
        logger.debug(f"Probe succeeded for {target.safe_dsn} in {latency_ms:.1f}ms")
        return ProbeResult(reachable=True, latency_ms=latency_ms)

    @staticmethod
    async def _close_quietly(conn: asyncpg.Connection, target: ConnectionTarget) -> None:
        try:
            await conn.close(timeout=ProbeDefaults.QUERY_TIMEOUT)
        except Exception as e:
            logger.warning(f"Closing probe connection to {target.safe_dsn} failed, terminating: {e}")
            conn.terminate()
