"""Error envelope shared by every discovery endpoint.

HTTP errors (unknown place slugs, bad query parameters) and unhandled
failures are all rendered as { "error": { "code", "message", "detail" } }.
"""

from typing import Any

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    code: str = Field(description="Machine-readable code, e.g. NOT_FOUND or INTERNAL_ERROR")
    message: str = Field(description="Human-readable message, e.g. 'Place not found: taco-stand'")
    detail: dict[str, Any] | None = Field(default=None, description="Extra context, when there is any")


class ErrorResponse(BaseModel):
    """Body returned for any non-2xx discovery response."""

    error: ErrorDetail
