"""Error envelope: every failure leaves the API as ``{"error": "..."}``."""

from typing import Any, Callable, Coroutine

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from fastapi.routing import APIRoute
from starlette.exceptions import HTTPException

from octoops.config import get_settings
from octoops.exceptions import InternalError, OctoOpsError

logger = structlog.get_logger()


def _operation_name(endpoint_name: str) -> str:
    """``accept_invite`` -> ``accept invite``."""
    return endpoint_name.replace("_", " ")


class ErrorBoundaryRoute(APIRoute):
    """Route class that converts unexpected endpoint failures to InternalError.

    Domain errors, HTTP errors and request validation errors pass through
    untouched to their handlers.
    """

    def get_route_handler(self) -> Callable[[Request], Coroutine[Any, Any, Response]]:
        original_route_handler = super().get_route_handler()
        operation = _operation_name(self.name)

        async def error_boundary_handler(request: Request) -> Response:
            try:
                return await original_route_handler(request)
            except (OctoOpsError, HTTPException, RequestValidationError):
                raise
            except Exception as exc:
                logger.exception(
                    "endpoint_failed",
                    operation=operation,
                    error=str(exc),
                )
                raise InternalError(f"Failed to {operation}", detail=str(exc)) from exc

        return error_boundary_handler


def _error_response(status_code: int, message: str, **extra: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


def _format_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(location)
    message = first.get("msg", "Invalid value")
    return f"{field}: {message}" if field else message


def register_exception_handlers(app: FastAPI) -> None:
    """Install the JSON error handlers on ``app``."""

    @app.exception_handler(OctoOpsError)
    async def domain_error_handler(request: Request, exc: OctoOpsError) -> JSONResponse:
        if isinstance(exc, InternalError):
            if exc.detail and not get_settings().is_production:
                return _error_response(exc.status_code, exc.message, detail=exc.detail)
            return _error_response(exc.status_code, exc.message)

        logger.info(
            "request_rejected",
            error_type=type(exc).__name__,
            status_code=exc.status_code,
            error=exc.message,
        )
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(HTTPException)
    async def http_error_handler(request: Request, exc: HTTPException) -> JSONResponse:
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        response = _error_response(exc.status_code, message)
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        message = _format_validation_error(exc)
        logger.info("request_invalid", error=message)
        return _error_response(400, message)
