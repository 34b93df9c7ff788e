import logging
from typing import Dict, Tuple, Type

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from shared.core.schemas import JsonOutResult
from shared.utils.app_status_code import AppStatusCode

logger = logging.getLogger(__name__)

# exception class -> (http status, app status code)
ErrorMap = Dict[Type[Exception], Tuple[int, str]]


def _failure(message: str, status_code: str, http_status: int) -> JSONResponse:
    wrapped = JsonOutResult(
        data=None,
        status="Failure",
        status_code=status_code,
        message=message
    ).model_dump()
    return JSONResponse(content=wrapped, status_code=http_status)


def _mapped_handler(http_status: int, status_code: str):
    async def mapped_exception_handler(request: Request, exc: Exception):
        message = getattr(exc, "message", None) or str(exc)
        if http_status >= 500:
            logger.error("%s %s failed: %s", request.method,
                         request.url.path, message)
        return _failure(message, status_code, http_status)

    return mapped_exception_handler


def setup_exception_handlers(app: FastAPI, error_map: ErrorMap = None):

    for exc_class, (http_status, status_code) in (error_map or {}).items():
        app.add_exception_handler(exc_class, _mapped_handler(http_status, status_code))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return _failure(str(exc), AppStatusCode.INVALID_INPUT, 422)

    # Catch all unhandled exceptions
    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s",
                         request.method, request.url.path)
        return _failure(str(exc), AppStatusCode.OPERATION_FAILED, 500)
