"""Error Handlers — global exception handlers producing the failure envelope.

Invariants:
    - MentorflowError → {success: false, error, code} with the error's http_status
    - RequestValidationError → 400 VALIDATION_ERROR naming the offending fields
    - Exception (catch-all) → 500 INTERNAL_ERROR, never leaks internal details
    - Error context is logged before conversion

Design Decisions:
    - Three-layer handler: domain (MentorflowError), validation (Pydantic), catch-all (Exception)
    - Client errors log at WARNING, server errors at ERROR
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from mentorflow.core.errors import MentorflowError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_domain_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_domain_error_handler(app: FastAPI) -> None:

    @app.exception_handler(MentorflowError)
    async def mentorflow_error_handler(request: Request, exc: MentorflowError):
        """Handle all mentorflow domain/infrastructure errors."""
        level = logging.WARNING if exc.is_client_error else logging.ERROR
        logger.log(
            level,
            f"{type(exc).__name__}: {exc.message}",
            extra={
                "error_code": exc.code,
                "path": request.url.path,
                "student_id": exc.context.student_id,
                "message_id": exc.context.message_id,
                "tool_name": exc.context.tool_name,
            },
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
            extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
            extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "success": False,
                "error": "Internal server error",
                "code": "INTERNAL_ERROR",
            },
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    fields = []
    for e in exc.errors():
        name = str(e["loc"][-1]) if e["loc"] else "body"
        if name not in fields:
            fields.append(name)
    return {
        "success": False,
        "error": f"Missing or invalid fields: {', '.join(fields)}",
        "code": "VALIDATION_ERROR",
    }
