"""HTTP status code mapping for exceptions."""

from typing import Dict, Type

from .base import NeoTenancyError
from .domain import (
    ConfigurationError,
    ValidationError,
    ConflictError,
    NotFoundError,
    DatabaseEditForbiddenError,
)
from .database import (
    DatabaseError,
    ConnectionError,
    SchemaError,
    TransactionError,
)


HTTP_STATUS_MAP: Dict[Type[Exception], int] = {
    # 400 Bad Request
    ValidationError: 400,

    # 403 Forbidden
    DatabaseEditForbiddenError: 403,

    # 404 Not Found
    NotFoundError: 404,

    # 409 Conflict
    ConflictError: 409,

    # 500 Internal Server Error
    ConfigurationError: 500,
    DatabaseError: 500,
    SchemaError: 500,
    TransactionError: 500,

    # 503 Service Unavailable
    ConnectionError: 503,

    NeoTenancyError: 500,
}


def get_http_status_code(exception: Exception) -> int:
    """Get HTTP status code for an exception, walking its MRO."""
    for exc_type in type(exception).__mro__:
        if exc_type in HTTP_STATUS_MAP:
            return HTTP_STATUS_MAP[exc_type]
    return 500
