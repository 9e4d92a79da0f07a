"""Custom exception handlers for FastAPI application.

This module registers global exception handlers that convert domain exceptions,
request validation errors and database errors into JSON responses.

Every error body has the same shape::

    {"message": "<human readable>", "kind": "<machine readable>"}

where kind is one of validation, authentication, authorization, not_found,
conflict or internal.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from mlms.domain.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainException,
    EntityNotFoundException,
    TokenRejectedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

GENERIC_DB_ERROR = "Database error occurred. Please try again."

_KIND_BY_STATUS = {
    status.HTTP_400_BAD_REQUEST: "validation",
    status.HTTP_401_UNAUTHORIZED: "authentication",
    status.HTTP_403_FORBIDDEN: "authorization",
    status.HTTP_404_NOT_FOUND: "not_found",
    status.HTTP_409_CONFLICT: "conflict",
}


def error_response(status_code: int, message: str, kind: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message, "kind": kind})


def _first_validation_message(exc: RequestValidationError) -> str:
    """Turn pydantic's error list into one readable sentence."""
    errors = list(exc.errors())
    if not errors:
        return "Invalid request"
    first = errors[0]
    if first.get("type") == "json_invalid":
        return "Malformed JSON body"
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


# Hey future me, this registers GLOBAL exception handlers for the entire app! Starlette picks the
# handler by walking the exception's MRO, so TokenRejectedError (a subclass of
# AuthenticationError) gets its OWN 403 handler while plain AuthenticationError stays 401.
# Call this during create_app(), before any request arrives.
def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers for domain, validation and database exceptions.

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(ValidationError)
    async def validation_exception_handler(
        request: Request, exc: ValidationError
    ) -> JSONResponse:
        """Handle domain validation exceptions with 400 Bad Request."""
        logger.warning(
            "Validation error at %s: %s",
            request.url.path,
            exc.message,
            extra={"path": request.url.path, "error": exc.message},
        )
        return error_response(status.HTTP_400_BAD_REQUEST, exc.message, exc.kind)

    @app.exception_handler(AuthenticationError)
    async def authentication_exception_handler(
        request: Request, exc: AuthenticationError
    ) -> JSONResponse:
        """Handle missing or wrong credentials with 401 Unauthorized."""
        logger.info(
            "Authentication failed at %s: %s",
            request.url.path,
            exc.message,
            extra={"path": request.url.path},
        )
        return error_response(status.HTTP_401_UNAUTHORIZED, exc.message, exc.kind)

    @app.exception_handler(TokenRejectedError)
    async def token_rejected_exception_handler(
        request: Request, exc: TokenRejectedError
    ) -> JSONResponse:
        """Handle presented-but-invalid tokens with 403 Forbidden."""
        logger.info(
            "Token rejected at %s",
            request.url.path,
            extra={"path": request.url.path},
        )
        return error_response(status.HTTP_403_FORBIDDEN, exc.message, exc.kind)

    @app.exception_handler(AuthorizationError)
    async def authorization_exception_handler(
        request: Request, exc: AuthorizationError
    ) -> JSONResponse:
        """Handle role and ownership failures with 403 Forbidden."""
        logger.warning(
            "Access denied at %s: %s",
            request.url.path,
            exc.message,
            extra={"path": request.url.path, "error": exc.message},
        )
        return error_response(status.HTTP_403_FORBIDDEN, exc.message, exc.kind)

    @app.exception_handler(EntityNotFoundException)
    async def entity_not_found_exception_handler(
        request: Request, exc: EntityNotFoundException
    ) -> JSONResponse:
        """Handle entity not found exceptions with 404 Not Found."""
        logger.info(
            "Entity not found at %s: %s %s",
            request.url.path,
            exc.entity_type,
            exc.entity_id,
            extra={
                "path": request.url.path,
                "entity_type": exc.entity_type,
                "entity_id": str(exc.entity_id),
            },
        )
        return error_response(status.HTTP_404_NOT_FOUND, exc.message, exc.kind)

    @app.exception_handler(ConflictError)
    async def conflict_exception_handler(request: Request, exc: ConflictError) -> JSONResponse:
        """Handle duplicates and invalid-state conflicts with 409 Conflict."""
        logger.warning(
            "Conflict at %s: %s",
            request.url.path,
            exc.message,
            extra={"path": request.url.path, "error": exc.message},
        )
        return error_response(status.HTTP_409_CONFLICT, exc.message, exc.kind)

    @app.exception_handler(DomainException)
    async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
        """Anything else from the domain (InternalError) is a 500."""
        logger.error(
            "Internal error at %s: %s",
            request.url.path,
            exc.message,
            extra={"path": request.url.path, "error": exc.message},
        )
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, exc.message, "internal")

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle malformed bodies, params and JSON with 400 Bad Request."""
        message = _first_validation_message(exc)
        logger.warning(
            "Request validation error at %s: %s",
            request.url.path,
            message,
            extra={"path": request.url.path, "error": message},
        )
        return error_response(status.HTTP_400_BAD_REQUEST, message, "validation")

    # Hey future me - IntegrityError means a unique constraint caught a race that our
    # check-then-insert missed (two registrations with one email, two subscriptions, ...).
    # That's a conflict, not a crash.
    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
        """Handle constraint violations with 409 Conflict."""
        logger.warning(
            "Integrity error at %s: %s",
            request.url.path,
            exc.orig,
            extra={"path": request.url.path},
        )
        return error_response(
            status.HTTP_409_CONFLICT,
            "Request conflicts with existing data",
            "conflict",
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        """Handle every other store fault with 500 and a generic message."""
        logger.error(
            "Database error at %s: %s",
            request.url.path,
            exc,
            extra={"path": request.url.path, "error_type": type(exc).__name__},
            exc_info=exc,
        )
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_DB_ERROR, "internal"
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Handle HTTP exceptions (404 route, 405 method) with the same body shape."""
        if exc.status_code >= 500:
            logger.error(
                "HTTP error %d at %s: %s",
                exc.status_code,
                request.url.path,
                exc.detail,
                extra={"path": request.url.path, "status_code": exc.status_code},
            )
        else:
            logger.info(
                "HTTP error %d at %s: %s",
                exc.status_code,
                request.url.path,
                exc.detail,
                extra={"path": request.url.path, "status_code": exc.status_code},
            )
        kind = _KIND_BY_STATUS.get(
            exc.status_code, "internal" if exc.status_code >= 500 else "validation"
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail), "kind": kind},
            headers=getattr(exc, "headers", None),
        )
