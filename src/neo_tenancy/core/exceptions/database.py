"""Database-related exceptions for neo-tenancy."""

from typing import Optional

from .base import NeoTenancyError


class DatabaseError(NeoTenancyError):
    """Base class for database-related errors."""
    pass


class ConnectionError(DatabaseError):
    """Raised when a target database cannot be reached or rejects credentials."""

    def __init__(self, message: str, target: Optional[str] = None, reason: Optional[str] = None):
        details = {}
        if target:
            details["target"] = target
        if reason:
            details["reason"] = reason
        super().__init__(message, details=details)
        self.target = target
        self.reason = reason


class ConnectionTimeoutError(ConnectionError):
    """Raised when connecting to a target database times out."""

    def __init__(self, target: str, timeout_seconds: float):
        super().__init__(
            f"Connection to '{target}' timed out after {timeout_seconds:g} seconds",
            target=target,
            reason="timeout",
        )
        self.timeout_seconds = timeout_seconds


class SchemaError(DatabaseError):
    """Raised when DDL fails after the connection succeeded.

    Creation is guarded and transactional, so the operation is safe to retry.
    """

    def __init__(self, feature_key: str, reason: str, table: Optional[str] = None):
        details = {"feature_key": feature_key, "reason": reason}
        if table:
            details["table"] = table
        message = f"Failed to create tables for feature '{feature_key}'"
        if table:
            message += f" (table {table})"
        super().__init__(f"{message}: {reason}", details=details)
        self.feature_key = feature_key
        self.reason = reason
        self.table = table


class TransactionError(DatabaseError):
    """Raised when a control-plane unit of work fails and is rolled back."""
    pass
