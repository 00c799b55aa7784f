"""
Traduction des erreurs du domaine en reponses HTTP.

Toutes les erreurs sont renvoyees dans l'enveloppe standard
{success: false, message, data: null}.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..core.errors import (
    ConflictError,
    InvalidArgumentError,
    NotFoundError,
    PermissionDeniedError,
    ProviderError,
    SuasorError,
    UnsupportedFeatureError,
)

STATUS_CODES: dict[type[SuasorError], int] = {
    NotFoundError: 404,
    PermissionDeniedError: 403,
    UnsupportedFeatureError: 400,
    InvalidArgumentError: 400,
    ConflictError: 409,
    ProviderError: 502,
}


def status_code_for(error: SuasorError) -> int:
    for error_type, status_code in STATUS_CODES.items():
        if isinstance(error, error_type):
            return status_code
    return 500


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, "data": None},
    )


async def suasor_error_handler(request: Request, exc: SuasorError) -> JSONResponse:
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.warning(f"{request.method} {request.url.path} : {exc}")
    return error_response(status_code, str(exc))


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail))


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = f"{location}: {first.get('msg', 'invalid request')}" if location else "invalid request"
    return error_response(400, message)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SuasorError, suasor_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
