"""Database repositories."""

from .connection_probe import AsyncpgConnectionProbe
from .control_plane_store import AsyncpgControlPlaneStore

__all__ = ["AsyncpgConnectionProbe", "AsyncpgControlPlaneStore"]
