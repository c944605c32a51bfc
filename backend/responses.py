"""
backend/responses.py

Uniform JSON envelope for every endpoint:

    {"success": true,  "data": ...}
    {"success": false, "error": "..."}

Handlers raise HTTPException; the exception handlers registered here turn
every failure (including request parsing errors and unexpected exceptions)
into the error envelope.
"""

from __future__ import annotations

import traceback
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from backend.config import IS_DEV, IS_PROD
from backend.schemas import error_message

INTERNAL_ERROR = "Internal server error"


def success_response(data: Any, status_code: int = 200) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": True, "data": jsonable_encoder(data)},
    )


def error_response(message: str, status_code: int = 400) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


def internal_error(exc: Exception, label: str) -> HTTPException:
    """
    Log an unexpected failure and build the 500 to raise.

    The internal detail is always logged; it is only returned to the caller
    outside production.
    """
    print(f"[ERROR] {label}: {type(exc).__name__}: {exc}")
    if IS_DEV:
        traceback.print_exception(type(exc), exc, exc.__traceback__)
    if IS_PROD:
        return HTTPException(status_code=500, detail=INTERNAL_ERROR)
    return HTTPException(status_code=500, detail=f"{INTERNAL_ERROR}: {type(exc).__name__}: {exc}")


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": message},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors and errors[0].get("type") == "json_invalid":
        message = "Invalid JSON body"
    elif errors:
        message = error_message(errors[0])
    else:
        message = "Invalid request"
    return error_response(message, 400)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    http_exc = internal_error(exc, f"{request.method} {request.url.path}")
    return error_response(http_exc.detail, 500)


def register_exception_handlers(app: FastAPI) -> None:
    # Starlette base class also covers unknown routes (404) and bad methods (405)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
