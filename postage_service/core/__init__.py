"""
Core Package

Configuration, logging and error handling shared by the quote service.

Modules:
- config: Environment configuration and settings
- logging: Logging with trace_id support
- errors: Error classes and FastAPI exception handlers

Usage:
    from postage_service.core import settings, setup_logging, ValidationError
"""

from postage_service.core.config import settings, get_settings

from postage_service.core.logging import (
    setup_logging,
    get_trace_id,
    mask_secret,
)

from postage_service.core.errors import (
    AppError,
    ValidationError,
    PostcodeParseError,
    NoBracketMatchError,
    NotFoundError,
    OriginNotConfiguredError,
    StoreError,
    error_payload,
    register_exception_handlers,
)

__all__ = [
    # Config
    "settings",
    "get_settings",

    # Logging
    "setup_logging",
    "get_trace_id",
    "mask_secret",

    # Errors
    "AppError",
    "ValidationError",
    "PostcodeParseError",
    "NoBracketMatchError",
    "NotFoundError",
    "OriginNotConfiguredError",
    "StoreError",
    "error_payload",
    "register_exception_handlers",
]
