"""
Core Errors Module

Error classes shared by the quoting engine, the JSON stores and the API layer,
plus the FastAPI exception handlers that render them.

Taxonomy:
- ValidationError (400): bad client input, including unknown item/packaging
  ids, unparseable postcodes and shipments outside the bracket table
- NotFoundError (404): CRUD lookups
- OriginNotConfiguredError (500): origin settings missing (server precondition)
- StoreError (500): data file unreadable or unwritable

Carrier failures never appear here; providers turn them into "no quote".

Usage:
    from postage_service.core.errors import ValidationError, error_payload

    raise ValidationError("Packaging is required", details={"field": "packagingId"})
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


# ==================== Base Error Class ====================

class AppError(Exception):
    """
    Base application error class.

    Attributes:
        code: Error code (e.g., "validation_error", "not_found")
        message: Human-readable error message
        details: Optional additional error context
        status_code: HTTP status code for this error type
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self._default_code()
        self.details = details or {}
        self.status_code = status_code

    def _default_code(self) -> str:
        """snake_case class name without the Error suffix."""
        name = self.__class__.__name__
        if name.endswith("Error"):
            name = name[:-5]

        result = []
        for i, char in enumerate(name):
            if char.isupper() and i > 0:
                result.append("_")
            result.append(char.lower())

        return "".join(result)

    def to_dict(self, trace_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Convert error to dictionary for JSON responses.

        Args:
            trace_id: Optional request trace ID

        Returns:
            Error dict with code, message, details, trace_id, timestamp
        """
        return error_payload(self.code, self.message, self.details, trace_id)


# ==================== Specific Error Classes ====================

class ValidationError(AppError):
    """
    Validation error (400 Bad Request).

    Raised when client input is unusable.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="validation_error",
            details=details,
            status_code=400
        )


class PostcodeParseError(ValidationError):
    """A postcode that is not a plain run of ASCII digits."""

    def __init__(self, postcode: Any):
        super().__init__(
            message=f"Postcode '{postcode}' is not a valid number",
            details={"postcode": str(postcode)}
        )
        self.postcode = postcode


class NoBracketMatchError(ValidationError):
    """
    Neither the actual nor the volumetric weight falls inside any bracket.

    The shipment is out of range for rules pricing, which is a property of the
    request, so it is reported as client input.
    """

    def __init__(self, weight_kg: float, volumetric_weight_kg: float):
        super().__init__(
            message=(
                f"No weight bracket matches weight {weight_kg:.3f} kg "
                f"or volumetric weight {volumetric_weight_kg:.3f} kg"
            ),
            details={
                "weight_kg": weight_kg,
                "volumetric_weight_kg": volumetric_weight_kg,
            }
        )
        self.code = "no_bracket_match"
        self.weight_kg = weight_kg
        self.volumetric_weight_kg = volumetric_weight_kg


class NotFoundError(AppError):
    """
    Not found error (404 Not Found).

    Raised when a requested resource does not exist.
    """

    def __init__(
        self,
        message: str = "Resource not found",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="not_found",
            details=details,
            status_code=404
        )


class InternalError(AppError):
    """
    Internal server error (500 Internal Server Error).
    """

    def __init__(
        self,
        message: str = "Internal server error",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="internal_error",
            details=details,
            status_code=500
        )


class OriginNotConfiguredError(AppError):
    """Quotes need the merchant origin; its absence is a server misconfiguration."""

    def __init__(self):
        super().__init__(
            message="Origin settings must be configured before calculating quotes",
            code="origin_not_configured",
            status_code=500
        )


class StoreError(InternalError):
    """A JSON data file could not be read or written."""


# ==================== Helper Functions ====================

def error_payload(
    code: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
    trace_id: Optional[str] = None
) -> Dict[str, Any]:
    """
    Create a standardized error payload dict.

    Example:
        >>> payload = error_payload("validation_error", "Packaging is required")
        >>> payload["code"]
        'validation_error'
    """
    result = {
        "code": code,
        "message": message,
    }

    if details:
        result["details"] = details

    if trace_id:
        result["trace_id"] = trace_id

    result["timestamp"] = datetime.now(timezone.utc).isoformat()
    return result


def _current_trace_id() -> Optional[str]:
    from postage_service.core.logging import get_trace_id

    trace_id = get_trace_id()
    return None if trace_id == "-" else trace_id


def register_exception_handlers(app) -> None:
    """
    Install handlers that wrap every error as {"error": {...}}.

    Args:
        app: FastAPI application
    """
    from fastapi import Request
    from fastapi.exceptions import RequestValidationError
    from fastapi.responses import JSONResponse

    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error(f"{exc.code}: {exc.message}")
        else:
            logger.info(f"Rejected {request.method} {request.url.path}: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.to_dict(trace_id=_current_trace_id())},
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = first.get("msg", "Invalid request")
        if field:
            message = f"{field}: {message}"
        return JSONResponse(
            status_code=400,
            content={
                "error": error_payload(
                    "validation_error",
                    message,
                    trace_id=_current_trace_id(),
                )
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "error": error_payload(
                    "internal_error",
                    "Unexpected server error",
                    trace_id=_current_trace_id(),
                )
            },
        )
