"""Exception handlers for the application."""

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.routing import NoMatchFound

from student_records.exceptions import StudentRecordsException
from student_records.logging_config import get_logger, log_with_context
from student_records.views.template_renderer import RecordViewRenderer

logger = get_logger(__name__)


def _render_error_page(
    request: Request, status_code: int, message: str, headers: dict[str, str] | None = None
) -> HTMLResponse:
    renderer: RecordViewRenderer | None = getattr(request.app.state, "renderer", None)
    if renderer is None:
        return HTMLResponse(f"<h1>Error {status_code}</h1>", status_code=status_code, headers=headers)

    try:
        back_url = str(request.url_for("students.index"))
    except NoMatchFound:
        back_url = "/"
    return HTMLResponse(
        renderer.render_error(status_code, message, back_url=back_url),
        status_code=status_code,
        headers=headers,
    )


async def student_records_exception_handler(request: Request, exc: StudentRecordsException) -> HTMLResponse:
    """Handle custom exceptions by rendering an error page with their status code."""
    log_with_context(
        logger,
        "warning",
        "Student records error",
        error_code=exc.code.value,
        error_message=exc.message,
        status_code=exc.status_code,
        details=exc.details,
        method=request.method,
        url=str(request.url),
        event_type="student_records_error",
    )

    return _render_error_page(request, exc.status_code, exc.message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> HTMLResponse:
    """Render framework HTTP errors (unknown paths, unsupported methods) as error pages."""
    log_with_context(
        logger,
        "info",
        "HTTP error",
        status_code=exc.status_code,
        detail=exc.detail,
        method=request.method,
        url=str(request.url),
        event_type="http_error",
    )

    return _render_error_page(request, exc.status_code, str(exc.detail), getattr(exc, "headers", None))


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> HTMLResponse:
    """Render malformed path or query parameters as error pages.

    A path parameter that does not parse (e.g. a non-numeric record id) cannot
    name any page, so it is reported as 404. Bad query parameters are 422.
    """
    errors = exc.errors()
    in_path = any(error.get("loc", ())[:1] == ("path",) for error in errors)
    status_code = 404 if in_path else 422

    log_with_context(
        logger,
        "info",
        "Request validation error",
        status_code=status_code,
        locations=[".".join(str(part) for part in error.get("loc", ())) for error in errors],
        method=request.method,
        url=str(request.url),
        event_type="request_validation_error",
    )

    message = "Page not found" if in_path else "Invalid request parameters"
    return _render_error_page(request, status_code, message)


async def general_exception_handler(request: Request, exc: Exception) -> HTMLResponse:
    """Handle general exceptions with logging."""
    log_with_context(
        logger,
        "error",
        "Unhandled exception",
        error=str(exc),
        error_type=type(exc).__name__,
        method=request.method,
        url=str(request.url),
        event_type="unhandled_error",
    )
    logger.error("Exception traceback:", exc_info=True)

    # Don't expose internal error details to clients
    return _render_error_page(request, 500, "Internal server error")


def register_error_handlers(app) -> None:
    """Register all exception handlers with the application.

    Args:
        app: FastAPI application instance
    """
    from slowapi import _rate_limit_exceeded_handler
    from slowapi.errors import RateLimitExceeded

    app.add_exception_handler(StudentRecordsException, student_records_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
