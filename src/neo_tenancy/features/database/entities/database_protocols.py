"""Database protocols for neo-tenancy."""

from abc import abstractmethod
from typing import Any, AsyncContextManager, Awaitable, Callable, Optional, Protocol, TypeVar, runtime_checkable

from .connection_target import ConnectionTarget, ProbeResult

T = TypeVar("T")


@runtime_checkable
class ConnectionProbe(Protocol):
    """Protocol for short-lived liveness checks against a database target."""

    @abstractmethod
    async def probe(self, target: ConnectionTarget) -> ProbeResult:
        """Connect, run a trivial query, disconnect. Never raises."""
        ...


@runtime_checkable
class TargetConnector(Protocol):
    """Protocol for opening a connection to a tenant target database."""

    @abstractmethod
    async def create_connection(self, target: ConnectionTarget, timeout: Optional[float] = None) -> Any:
        """Open a connection, raising ConnectionError on failure."""
        ...


@runtime_checkable
class ControlPlaneStore(Protocol):
    """Unit of work over the control-plane database.

    ``run_in_transaction`` calls ``work`` with a connection inside a
    transaction and commits when it returns; any exception rolls back.
    """

    @abstractmethod
    def connection(self) -> AsyncContextManager[Any]:
        """Acquire a connection for reads outside a transaction."""
        ...

    @abstractmethod
    async def run_in_transaction(self, work: Callable[[Any], Awaitable[T]]) -> T:
        """Run ``work(conn)`` atomically."""
        ...
