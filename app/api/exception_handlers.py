from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.responses import error_response
from app.domain.exceptions import RelayError

logger = logging.getLogger("app.errors")


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None) or request.headers.get("X-Request-ID")


def register_exception_handlers(app: FastAPI) -> None:
    """Register application exception handlers."""

    @app.exception_handler(RelayError)
    async def handle_relay_error(request: Request, exc: RelayError) -> JSONResponse:
        # IMPORTANT: do not log request bodies; the question text stays out of the logs.
        logger.info(
            "Request failed",
            extra={
                "request_id": _request_id(request),
                "http_method": request.method,
                "request_path": request.url.path,  # no query string
                "status_code": exc.status_code,
                "error": exc.error_kind,
            },
        )
        return error_response(status_code=exc.status_code, message=exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        logger.info(
            "Request body rejected",
            extra={
                "request_id": _request_id(request),
                "http_method": request.method,
                "request_path": request.url.path,
                "status_code": 400,
                "error": "invalid_body",
            },
        )
        return error_response(status_code=400, message="invalid request body")

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(
        request: Request,
        exc: StarletteHTTPException,
    ) -> JSONResponse:
        if exc.status_code == 404:
            return error_response(status_code=404, message="not found", include_code=False)
        message = str(exc.detail).lower() if exc.detail else "request failed"
        response = error_response(status_code=exc.status_code, message=message)
        if exc.headers:
            response.headers.update(exc.headers)
        return response

