"""Global exception handlers giving every error the same JSON envelope.

    {"error": "<code>", "message": "...", "details": ..., "request_id": "..."}
"""

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from libs.common.errors import BackendError, ServiceError
from libs.common.logging import get_logger, get_request_id

logger = get_logger(__name__)


def _envelope(status_code: int, code: str, message: str, details=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": code,
            "message": message,
            "details": details,
            "request_id": get_request_id(),
        },
    )


def add_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        if isinstance(exc, BackendError):
            logger.warning(
                "Backend call failed: %s (status=%s)", exc.message, exc.status
            )
            # Pass the backend's own 4xx through; anything else is a bad gateway.
            if exc.status is not None and 400 <= exc.status < 500:
                return _envelope(exc.status, exc.code, exc.message, exc.details)
        return _envelope(exc.status_code, exc.code, exc.message, exc.details)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _envelope(exc.status_code, "http_error", str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ):
        return _envelope(
            422,
            "request_invalid",
            "Request validation failed",
            jsonable_encoder(exc.errors()),
        )
