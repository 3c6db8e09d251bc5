"""
Record API error handling.

Maps the backend exception hierarchy onto JSON responses shaped
`{"error": str, "errorData"?: any}` with the status each exception carries.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.backend.common.exceptions import (
    InternalError,
    NotFoundError,
    RecordsSyncError,
    RemoteActionError,
)
from src.backend.common.models.records import ErrorResponse

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def error_response(exc: RecordsSyncError) -> JSONResponse:
    error_data = exc.error_data if isinstance(exc, RemoteActionError) else None
    body = ErrorResponse(error=exc.message, error_data=error_data).to_body()
    return JSONResponse(status_code=exc.status_code, content=body)


def handle_record_errors(default_message: str) -> Callable[[F], F]:
    """
    Decorator for record endpoints.

    Typed errors keep their status; anything else becomes a 500 whose message
    is the exception's own text, or `default_message` when it has none.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await func(*args, **kwargs)

            except NotFoundError as e:
                logger.warning("Not found", extra={"error": str(e), **e.details})
                return error_response(e)

            except RemoteActionError as e:
                # Already logged where the action ran.
                return error_response(e)

            except RecordsSyncError as e:
                logger.warning("Rejected record request", extra={"error": str(e)})
                return error_response(e)

            except Exception as e:
                logger.exception(default_message, extra={"error": str(e)})
                return error_response(InternalError(str(e) or default_message))

        return wrapper  # type: ignore

    return decorator


def register_exception_handlers(app: FastAPI) -> None:
    """Render errors raised outside endpoint bodies (dependencies, validation)."""

    @app.exception_handler(RecordsSyncError)
    async def _records_sync_error_handler(request: Request, exc: RecordsSyncError) -> JSONResponse:
        return error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def _request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        problems = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorResponse(error="Invalid request", error_data=problems).to_body(),
        )
