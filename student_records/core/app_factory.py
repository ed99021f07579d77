"""Application factory for creating and configuring the FastAPI app."""

from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from student_records import __version__
from student_records.config import Settings, get_settings
from student_records.core.lifespan import lifespan
from student_records.core.middleware import setup_middleware
from student_records.middleware.error_handlers import register_error_handlers
from student_records.routers import health_router, student_router
from student_records.views.template_renderer import RecordViewRenderer

STATIC_DIR = Path(__file__).parent.parent / "static"


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to configure the app with (defaults to get_settings())

    Returns:
        Configured FastAPI application instance
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_title,
        description="""
        🎓 **Student Records** - Server-rendered admin screens for student records

        ## Pages
        - `/students` - Paginated list with view, edit and delete actions
        - `/students/create` - Form for a new student
        - `/students/{id}` - Student details
        - `/students/{id}/edit` - Edit form

        Forms carry a CSRF token; HTML forms send updates and deletes as POST
        with a `_method` field of `PUT` or `DELETE`.

        ## 📊 Health
        - `/health` - Basic health check
        - `/health/ready` - Readiness check
        """,
        version=__version__,
        lifespan=lifespan,
        license_info={
            "name": "MIT",
        },
    )

    # Configure middleware
    setup_middleware(app, settings)

    # Register exception handlers
    register_error_handlers(app)

    # Shared view renderer
    app.state.renderer = RecordViewRenderer.from_settings(settings)

    # Mount static files (shared stylesheet)
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    # Include routers
    app.include_router(student_router.router, tags=["students"])
    app.include_router(health_router.router, tags=["health"])

    return app
