"""Database utilities."""

from .connection_factory import ConnectionFactory
from .error_handling import redact_secrets, describe_connection_error, format_database_error

__all__ = ["ConnectionFactory", "redact_secrets", "describe_connection_error", "format_database_error"]
