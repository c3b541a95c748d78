"""Error types surfaced to API callers.

Handlers turn any ``APIError`` raised below the routers into a JSON body
``{"error": ..., "detail": ...}`` with the matching status code. Execution
failures are not errors: they travel as ``Outcome`` values.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class ErrorResponse(BaseModel):
    error: str
    detail: str | None = None
    context: dict[str, Any] | None = None


class APIError(Exception):
    """Base class for API errors."""

    status_code: int = 500
    error: str = "internal_error"
    detail: str = "An unexpected error occurred"

    def __init__(self, detail: str | None = None, **context: Any) -> None:
        self.detail = detail or self.__class__.detail
        self.context = context if context else None
        super().__init__(self.detail)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(error=self.error, detail=self.detail, context=self.context)


class NotFoundError(APIError):
    status_code = 404
    error = "not_found"
    detail = "Resource not found"


class BadRequestError(APIError):
    status_code = 400
    error = "bad_request"
    detail = "Invalid request"


class UnauthorizedError(APIError):
    status_code = 401
    error = "unauthorized"
    detail = "Wrong username or password"


class ServiceUnavailableError(APIError):
    status_code = 503
    error = "service_unavailable"
    detail = "Service temporarily unavailable"


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    logger.warning(
        "API error: %s (status=%d, path=%s)",
        exc.detail,
        exc.status_code,
        request.url.path,
    )
    headers = None
    if exc.status_code == 401:
        headers = {"WWW-Authenticate": "Basic"}
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(exclude_none=True),
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(APIError, api_error_handler)
