"""Error types and the HTML error boundary."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from locallibrary.api.rendering import templates

logger = logging.getLogger(__name__)


class NotFoundError(Exception):
    """A required catalog record does not exist."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, detail: str = "Not found") -> None:
        super().__init__(detail)
        self.detail = detail


def render_error(request: Request, status_code: int, message: str) -> HTMLResponse:
    """Render the shared error page."""
    return templates.TemplateResponse(
        request,
        "error.html",
        {"title": "Error", "status_code": status_code, "message": message},
        status_code=status_code,
    )


async def not_found_handler(request: Request, exc: NotFoundError) -> HTMLResponse:
    return render_error(request, exc.status_code, exc.detail)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> HTMLResponse:
    return render_error(request, exc.status_code, str(exc.detail))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> HTMLResponse:
    return render_error(
        request,
        422,
        "The request could not be understood.",
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> HTMLResponse:
    logger.exception(f"Store error while handling {request.method} {request.url.path}")
    return render_error(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Something went wrong while talking to the catalog database.",
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the HTML error boundary on the application."""
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
