"""Connection target and probe result entities."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from urllib.parse import urlparse


@dataclass(frozen=True)
class ConnectionTarget:
    """A PostgreSQL database the control plane may connect to.

    Either ``url`` is set, or the structured fields are. When both are
    present the URL wins.
    """

    url: Optional[str] = None
    host: Optional[str] = None
    port: int = 5432
    database: Optional[str] = None
    user: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)
    ssl: bool = False

    def __post_init__(self):
        if self.url:
            parsed = urlparse(self.url)
            if parsed.scheme not in ('postgresql', 'postgres'):
                raise ValueError(f"Unsupported database scheme: {parsed.scheme or '<none>'}")
        if self.port is not None and not 1 <= int(self.port) <= 65535:
            raise ValueError(f"Invalid port: {self.port}")

    def __repr__(self) -> str:
        return f"ConnectionTarget({self.safe_dsn})"

    @property
    def is_configured(self) -> bool:
        """A target can be connected to when it has a URL or at least a host."""
        return bool(self.url or self.host)

    @property
    def safe_dsn(self) -> str:
        """DSN without password for logging."""
        if self.url:
            parsed = urlparse(self.url)
            user = f"{parsed.username}@" if parsed.username else ""
            port = f":{parsed.port}" if parsed.port else ""
            return f"{parsed.scheme}://{user}{parsed.hostname or ''}{port}{parsed.path}"
        user = f"{self.user}@" if self.user else ""
        return (
            f"postgresql://{user}{self.host or ''}:{self.port}/{self.database or ''}"
            f"?ssl={'require' if self.ssl else 'disable'}"
        )

    @property
    def secrets(self) -> tuple:
        """Secret values that must never appear in logs or error detail."""
        values = []
        if self.password:
            values.append(self.password)
        if self.url:
            parsed = urlparse(self.url)
            if parsed.password:
                values.append(parsed.password)
        return tuple(values)

    def connect_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for ``asyncpg.connect``.

        SSL uses ``require``, which encrypts without verifying the
        server certificate.
        """
        if self.url:
            return {"dsn": self.url}
        return {
            "host": self.host,
            "port": self.port,
            "database": self.database,
            "user": self.user,
            "password": self.password,
            "ssl": "require" if self.ssl else "disable",
        }

    def merged_with(
        self,
        url: Optional[str] = None,
        host: Optional[str] = None,
        port: Optional[int] = None,
        database: Optional[str] = None,
        user: Optional[str] = None,
        password: Optional[str] = None,
        ssl: Optional[bool] = None,
    ) -> "ConnectionTarget":
        """Overlay supplied values onto this target, keeping stored ones otherwise.

        A new URL replaces every structured field; a new host replaces a
        stored URL.
        """
        if url:
            return ConnectionTarget(url=url)
        return ConnectionTarget(
            url=None if host else self.url,
            host=host or self.host,
            port=port if port is not None else self.port,
            database=database or self.database,
            user=user or self.user,
            password=password or self.password,
            ssl=ssl if ssl is not None else self.ssl,
        )


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of a connection probe."""

    reachable: bool
    latency_ms: float
    checked_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    error_detail: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "reachable": self.reachable,
            "latency_ms": round(self.latency_ms, 2),
            "checked_at": self.checked_at.isoformat(),
            "error_detail": self.error_detail,
        }
