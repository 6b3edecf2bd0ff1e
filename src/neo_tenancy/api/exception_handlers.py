"""
Exception handlers for the neo-tenancy FastAPI application.

Domain errors are rendered with the status from ``HTTP_STATUS_MAP`` and the
standard ``{"success": false, "message", "errors"}`` body.
"""
from typing import Any, Callable, Dict, Optional
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..core.exceptions import NeoTenancyError, get_http_status_code

logger = logging.getLogger(__name__)


class ExceptionHandlerRegistry:
    """Registers the application's exception handlers."""

    def __init__(
        self,
        response_formatter: Optional[Callable[..., Dict[str, Any]]] = None,
        is_production: bool = True
    ):
        self.response_formatter = response_formatter or self._default_response_formatter
        self.is_production = is_production

    def _default_response_formatter(
        self,
        message: str,
        errors: Optional[list] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        return {
            "success": False,
            "message": message,
            "errors": errors or [],
            "data": None,
            "metadata": metadata or {}
        }

    def register_handlers(self, app: FastAPI) -> None:
        """Register exception handlers for the application."""

        @app.exception_handler(NeoTenancyError)
        async def neo_tenancy_error_handler(request: Request, exc: NeoTenancyError):
            status_code = get_http_status_code(exc)
            if status_code >= 500:
                logger.error(f"{request.method} {request.url.path} failed: {exc.error_code}: {exc.message}")
            return JSONResponse(
                status_code=status_code,
                content=self.response_formatter(
                    message=exc.message,
                    errors=[exc.to_dict()],
                    metadata={"path": request.url.path},
                )
            )

        @app.exception_handler(RequestValidationError)
        async def request_validation_handler(request: Request, exc: RequestValidationError):
            # Input values are not echoed back; they may hold credentials
            errors = [
                {
                    "code": "ValidationError",
                    "message": error.get("msg", "Invalid value"),
                    "details": {"loc": [str(part) for part in error.get("loc", ())]},
                    "type": "ValidationError",
                }
                for error in exc.errors()
            ]
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content=self.response_formatter(message="Request validation failed", errors=errors)
            )

        @app.exception_handler(Exception)
        async def general_exception_handler(request: Request, exc: Exception):
            logger.error(f"Unhandled exception: {exc}", exc_info=True)
            message = "An unexpected error occurred" if self.is_production else str(exc)
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content=self.response_formatter(message=message)
            )


def register_exception_handlers(app: FastAPI, is_production: bool = True) -> None:
    """Create a registry and register its handlers in one call."""
    ExceptionHandlerRegistry(is_production=is_production).register_handlers(app)
