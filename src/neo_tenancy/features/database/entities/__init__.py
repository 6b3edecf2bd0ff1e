"""Database entities."""

from .connection_target import ConnectionTarget, ProbeResult
from .database_protocols import ConnectionProbe, TargetConnector, ControlPlaneStore

__all__ = [
    "ConnectionTarget",
    "ProbeResult",
    "ConnectionProbe",
    "TargetConnector",
    "ControlPlaneStore",
]
