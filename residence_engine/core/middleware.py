"""
Core middleware and exception handler registration for the FastAPI application.
"""
from __future__ import annotations

import time
import uuid
from typing import Callable

from fastapi import FastAPI, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from residence_engine.core.exceptions import BaseAppException, ValidationError
from residence_engine.core.logging import get_logger, request_id as request_id_var

logger = get_logger(__name__)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware that adds a unique request ID to each incoming request.

    The request ID is stored in request.state.request_id, bound into the
    logging context, and echoed back in the X-Request-ID response header.
    """

    def __init__(self, app: ASGIApp, header_name: str = "X-Request-ID"):
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Reuse an upstream request ID when a proxy already assigned one
        req_id = request.headers.get(self.header_name) or str(uuid.uuid4())

        request.state.request_id = req_id
        token = request_id_var.set(req_id)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[self.header_name] = req_id
        return response


class TimingMiddleware(BaseHTTPMiddleware):
    """
    Middleware that measures and logs request processing time.

    Adds X-Process-Time header to responses with the processing duration in seconds.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()

        response = await call_next(request)

        process_time = time.perf_counter() - start_time
        response.headers["X-Process-Time"] = f"{process_time:.4f}"

        logger.info(
            "Request completed",
            extra={
                "request_id": getattr(request.state, "request_id", "unknown"),
                "method": request.method,
                "path": str(request.url.path),
                "status_code": response.status_code,
                "process_time": f"{process_time:.4f}s",
            }
        )

        return response


async def app_exception_handler(request: Request, exc: BaseAppException) -> JSONResponse:
    """Render typed application errors that escaped the service layer."""
    logger.warning(
        f"Request failed with {exc.error_code.value}: {exc.message}",
        extra={
            "request_id": getattr(request.state, "request_id", "unknown"),
            "path": str(request.url.path),
            "error_code": exc.error_code.value,
        }
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies and parameters in the application error format."""
    field_errors = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path"))
        field_errors.setdefault(field or "request", []).append(error.get("msg", "invalid value"))

    app_error = ValidationError("Request validation failed", field_errors=jsonable_encoder(field_errors))
    return JSONResponse(status_code=app_error.status_code, content=app_error.to_dict())


def register_middlewares(app: FastAPI) -> None:
    """
    Register core middlewares and exception handlers.

    The last middleware added is the outermost one, so RequestIDMiddleware
    is added last and the request ID is available to the timing log.
    """
    app.add_exception_handler(BaseAppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_middleware(TimingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    logger.debug("Core middlewares registered")
