"""Error handling - maps domain failures to responses and masks the rest."""

import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

from backend.app.db.tenancy import DomainValidationError

logger = logging.getLogger(__name__)


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Turns unhandled exceptions into a generic 500.

    Details (message and traceback) are only returned when ``expose_details``
    is set, i.e. in development.
    """

    def __init__(self, app: ASGIApp, expose_details: bool = False) -> None:
        super().__init__(app)
        self._expose_details = expose_details

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            logger.exception("Unhandled error on %s %s: %s", request.method, request.url.path, e)
            return JSONResponse(status_code=500, content=self._error_body(e))

    def _error_body(self, exc: Exception) -> dict[str, str]:
        if self._expose_details:
            return {
                "error": "An error occurred",
                "message": str(exc),
                "details": "".join(traceback.format_exception(exc)),
            }
        return {
            "error": "An error occurred while processing the request",
            "message": "Please try again later",
        }


async def domain_validation_handler(request: Request, exc: DomainValidationError) -> JSONResponse:
    """400 for entities rejected by model validators."""
    return JSONResponse(status_code=400, content={"detail": str(exc)})


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """409 for uniqueness and foreign key violations raised by the database."""
    logger.info("Integrity violation on %s: %s", request.url.path, exc.orig)
    return JSONResponse(
        status_code=409, content={"detail": "Resource conflicts with an existing record"}
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach domain exception handlers to the app."""
    app.add_exception_handler(DomainValidationError, domain_validation_handler)  # type: ignore[arg-type]
    app.add_exception_handler(IntegrityError, integrity_error_handler)  # type: ignore[arg-type]
