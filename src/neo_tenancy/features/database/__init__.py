"""Database feature: connection targets, probing and the control-plane store."""

from .entities import ConnectionTarget, ProbeResult, ConnectionProbe, TargetConnector, ControlPlaneStore
from .repositories import AsyncpgConnectionProbe, AsyncpgControlPlaneStore
from .utils import ConnectionFactory

__all__ = [
    "ConnectionTarget",
    "ProbeResult",
    "ConnectionProbe",
    "TargetConnector",
    "ControlPlaneStore",
    "AsyncpgConnectionProbe",
    "AsyncpgControlPlaneStore",
    "ConnectionFactory",
]
