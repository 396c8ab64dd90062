"""
Base Schemas

Shared pydantic base model and the error envelope returned by every endpoint.

JSON uses camelCase keys; Python code uses snake_case attributes. Models accept
either spelling on input.
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base for all wire models: camelCase aliases, snake_case attributes."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorDetail(BaseModel):
    """
    Error body produced by core.errors handlers.

    Fields:
    - code: machine-readable error code (validation_error, not_found, ...)
    - message: human-readable message
    - details: optional context (offending field, id, weights)
    - trace_id: request trace ID when available
    - timestamp: UTC ISO-8601 time the error was produced
    """
    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable message")
    details: Optional[Dict[str, Any]] = Field(None, description="Error context")
    trace_id: Optional[str] = Field(None, description="Request trace ID")
    timestamp: str = Field(..., description="UTC timestamp")


class ErrorResponse(BaseModel):
    """Envelope: {"error": {...}}."""
    error: ErrorDetail
