"""Base exceptions for neo-tenancy.

Every error raised across the service boundary inherits from
NeoTenancyError and carries a machine-checkable code, a human-readable
message and a details mapping. Details must never contain secrets.
"""

from typing import Any, Dict, Optional


class NeoTenancyError(Exception):
    """Base exception for all neo-tenancy errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Structured representation for API responses and logs."""
        return {
            "code": self.error_code,
            "message": self.message,
            "details": self.details,
            "type": self.__class__.__name__,
        }


def create_error_response(exception: NeoTenancyError) -> Dict[str, Any]:
    """Create standardized error response from exception."""
    return {
        "success": False,
        "message": exception.message,
        "errors": [exception.to_dict()],
        "data": None,
    }
