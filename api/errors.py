"""Global exception handlers for FastAPI."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from starlette.responses import JSONResponse

from api.base import error_response, ErrorCodes
from clients.service_order_client import PersistenceError

logger = logging.getLogger(__name__)


def _json(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=error_response(code, message).model_dump(mode="json"),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers on the app."""

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        message = str(exc)
        if "not found" in message.lower():
            return _json(404, ErrorCodes.NOT_FOUND, message)
        return _json(400, ErrorCodes.INVALID_REQUEST, message)

    # Pydantic errors raised inside handlers (e.g. an unknown status value in
    # an action payload); request-body errors arrive as RequestValidationError
    @app.exception_handler(ValidationError)
    async def model_validation_error_handler(request: Request, exc: ValidationError):
        return _json(422, ErrorCodes.VALIDATION_ERROR, str(exc.errors(include_url=False)))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return _json(422, ErrorCodes.VALIDATION_ERROR, str(exc.errors()))

    @app.exception_handler(PersistenceError)
    async def persistence_error_handler(request: Request, exc: PersistenceError):
        logger.warning(f"Persistence failure surfaced to client: {exc}")
        return _json(
            502,
            ErrorCodes.PERSISTENCE_FAILED,
            f"The change was not saved, please try again ({exc})",
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception")
        return _json(500, ErrorCodes.INTERNAL_ERROR, "An internal error occurred")
