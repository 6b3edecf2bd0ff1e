"""Asyncpg connection factory for tenant target and control-plane databases."""

import asyncio
import logging
from typing import Any, Optional

import asyncpg

from ....config.constants import ProbeDefaults
from ....core.exceptions import ConnectionError, ConnectionTimeoutError
from ..entities.connection_target import ConnectionTarget
from .error_handling import describe_connection_error, classify_connection_error

logger = logging.getLogger(__name__)


class ConnectionFactory:
    """Factory for creating asyncpg connections with standard error handling."""

    @staticmethod
    async def create_connection(
        target: ConnectionTarget,
        timeout: Optional[float] = None,
    ) -> asyncpg.Connection:
        """Create a single asyncpg connection to a target database.

        Args:
            target: Database connection target
            timeout: Connection timeout in seconds (default: 10)

        Returns:
            asyncpg.Connection instance

        Raises:
            ConnectionError: If connection fails, with redacted detail
        """
        if not target.is_configured:
            raise ConnectionError("No database connection details configured", reason="not_configured")

        timeout = timeout or ProbeDefaults.CONNECT_TIMEOUT
        try:
            return await asyncio.wait_for(
                asyncpg.connect(**target.connect_kwargs()),
                timeout=timeout
            )
        except asyncio.TimeoutError as e:
            logger.error(f"Connection to {target.safe_dsn} timed out after {timeout}s")
            raise ConnectionTimeoutError(target.safe_dsn, timeout) from e
        except Exception as e:
            detail = describe_connection_error(e, target.secrets, timeout)
            logger.error(f"Failed to create connection to {target.safe_dsn}: {detail}")
            raise ConnectionError(
                f"Connection failed for {target.safe_dsn}: {detail}",
                target=target.safe_dsn,
                reason=classify_connection_error(e),
            ) from e

    @staticmethod
    async def create_pool(
        dsn: str,
        min_size: int = 2,
        max_size: int = 10,
        command_timeout: float = 30.0,
        timeout: Optional[float] = None,
        **pool_options: Any,
    ) -> asyncpg.Pool:
        """Create an asyncpg connection pool for the control-plane store.

        Raises:
            ConnectionError: If pool creation fails
        """
        target = ConnectionTarget(url=dsn)
        try:
            return await asyncio.wait_for(
                asyncpg.create_pool(
                    dsn,
                    min_size=min_size,
                    max_size=max_size,
                    command_timeout=command_timeout,
                    **pool_options,
                ),
                timeout=timeout or ProbeDefaults.CONNECT_TIMEOUT
            )
        except Exception as e:
            detail = describe_connection_error(e, target.secrets, timeout)
            logger.error(f"Failed to create pool for {target.safe_dsn}: {detail}")
            raise ConnectionError(
                f"Pool creation failed for {target.safe_dsn}: {detail}",
                target=target.safe_dsn,
                reason=classify_connection_error(e),
            ) from e
