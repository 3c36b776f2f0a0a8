"""Exception handlers translating domain and store errors to JSON responses."""

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from amc.config import get_settings
from amc.exceptions import DependencyError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

MISSING_TABLES_MESSAGE = "Track tables not found. Run the database migrations."
STORE_FAILURE_MESSAGE = "The track store is unavailable"


def error_response(
    status_code: int,
    code: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": code, "message": message, "details": details or {}}},
    )


def describe_store_failure(exc: Exception) -> str:
    text = str(exc).lower()
    if "does not exist" in text or "no such table" in text:
        return MISSING_TABLES_MESSAGE
    return STORE_FAILURE_MESSAGE


def register_exception_handlers(app: FastAPI) -> None:
    """Attach handlers for the service's error taxonomy to ``app``."""

    @app.exception_handler(ValidationError)
    async def validation_error_handler(
        _request: Request, exc: ValidationError
    ) -> JSONResponse:
        return error_response(
            status.HTTP_400_BAD_REQUEST, exc.code, exc.message, exc.details
        )

    @app.exception_handler(NotFoundError)
    async def not_found_handler(_request: Request, exc: NotFoundError) -> JSONResponse:
        return error_response(
            status.HTTP_404_NOT_FOUND, exc.code, exc.message, exc.details
        )

    @app.exception_handler(DependencyError)
    async def dependency_error_handler(
        request: Request, exc: DependencyError
    ) -> JSONResponse:
        logger.error("Dependency failure on %s %s: %s", request.method, request.url.path, exc)
        details = {"reason": exc.message} if get_settings().expose_error_details else {}
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            exc.code,
            STORE_FAILURE_MESSAGE,
            details,
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(
        request: Request, exc: SQLAlchemyError
    ) -> JSONResponse:
        logger.error(
            "Database error on %s %s", request.method, request.url.path, exc_info=exc
        )
        details = {"reason": str(exc)} if get_settings().expose_error_details else {}
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            DependencyError.code,
            describe_store_failure(exc),
            details,
        )
