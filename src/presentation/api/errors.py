"""Exception handlers mapping domain errors to HTTP responses."""

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.domain.exceptions import BastionException, InternalError
from src.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


def _error_response(exc: BastionException) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


async def handle_bastion_exception(request: Request, exc: BastionException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{exc.error_code} at {request.url.path}: {exc.message}", exc_info=exc)
    elif exc.status_code in (401, 403):
        logger.warning(f"HTTP {exc.status_code} at {request.url.path}: {exc.message}")
    return _error_response(exc)


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={
            "error": "VALIDATION_ERROR",
            "message": "request validation failed",
            "details": {"errors": jsonable_encoder(exc.errors())},
        },
    )


async def handle_unhandled(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error at {request.url.path}", exc_info=exc)
    return _error_response(InternalError())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BastionException, handle_bastion_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(Exception, handle_unhandled)
