# shop_service/errors.py
import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

# Codes for plain HTTPExceptions raised by the framework (unknown route, bad method, ...)
STATUS_CODES = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    500: "internal_error",
}


class ShopError(HTTPException):
    """Base error: an HTTPException that also carries a stable machine-readable code."""

    status_code = 500
    code = "internal_error"

    def __init__(self, message: str):
        super().__init__(status_code=self.status_code, detail=message)
        self.message = message


class ValidationError(ShopError):
    status_code = 400
    code = "validation_error"


class ConflictError(ShopError):
    status_code = 400
    code = "conflict"


class InvalidCredentialsError(ShopError):
    status_code = 400
    code = "invalid_credentials"


class UnauthorizedError(ShopError):
    status_code = 401
    code = "unauthorized"


class ForbiddenError(ShopError):
    status_code = 403
    code = "forbidden"


class NotFoundError(ShopError):
    status_code = 404
    code = "not_found"


class InternalError(ShopError):
    status_code = 500
    code = "internal_error"


def error_body(message: str, code: str) -> dict:
    return {"message": message, "code": code}


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    code = getattr(exc, "code", None) or STATUS_CODES.get(exc.status_code, "error")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail), code),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = "Invalid request"
    logger.info("Rejected request to %s: %s", request.url.path, message)
    return JSONResponse(status_code=400, content=error_body(message, ValidationError.code))


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=InternalError.status_code,
        content=error_body("Terjadi kesalahan pada server.", InternalError.code),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
