"""Exception handlers: map the error taxonomy to HTTP responses.

Every error body is {"message": str}. InternalError causes are logged
here and replaced by a generic message.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from opendydns.errors import DydnsError, InternalError

logger = structlog.get_logger()


async def dydns_error_handler(request: Request, exc: DydnsError) -> JSONResponse:
    headers = None
    if exc.status_code == 401:
        headers = {"WWW-Authenticate": "Bearer"}
    if exc.status_code >= 500:
        logger.error(
            "api.internal_error",
            path=request.url.path,
            cause=repr(exc.__cause__) if exc.__cause__ else None,
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message},
        headers=headers,
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = "Malformed request"
    return JSONResponse(status_code=422, content={"message": message})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("api.internal_error", path=request.url.path, cause=repr(exc))
    return JSONResponse(status_code=500, content={"message": InternalError().message})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DydnsError, dydns_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
