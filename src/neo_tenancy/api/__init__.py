"""FastAPI application for neo-tenancy."""

from .app import create_app, build_services, install_services, ServiceContainer, main
from .exception_handlers import ExceptionHandlerRegistry, register_exception_handlers

__all__ = [
    "create_app",
    "build_services",
    "install_services",
    "ServiceContainer",
    "main",
    "ExceptionHandlerRegistry",
    "register_exception_handlers",
]
