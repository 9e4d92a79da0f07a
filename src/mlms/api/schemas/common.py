"""Schemas shared by several routers."""

from typing import Any

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str = Field(..., description="Human-readable result")


class ErrorResponse(BaseModel):
    """Body of every non-2xx response."""

    message: str = Field(..., description="Human-readable error")
    kind: str = Field(
        ...,
        description="validation, authentication, authorization, not_found, conflict or internal",
    )


# Documented on every /api route so the OpenAPI schema shows the {message, kind} error body
ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    code: {"model": ErrorResponse} for code in (400, 401, 403, 404, 409, 500)
}
