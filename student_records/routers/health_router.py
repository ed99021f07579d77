"""Health endpoints."""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from jinja2 import TemplateNotFound

from student_records import __version__
from student_records.dependencies import get_student_store
from student_records.models import DetailedHealthResponse, HealthResponse
from student_records.state_managers import StudentRecordStore
from student_records.views.template_renderer import templates

router = APIRouter()

REQUIRED_TEMPLATES = (
    "layout.html",
    "students/index.html",
    "students/show.html",
    "students/edit.html",
    "students/create.html",
)


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Basic health check endpoint.

    Returns simple status for Docker healthcheck and basic monitoring.
    For detailed health status, use `/health/ready`.
    """
    return HealthResponse(status="ok", version=__version__)


@router.get("/health/ready", response_model=DetailedHealthResponse)
async def readiness_check(
    store: StudentRecordStore = Depends(get_student_store),
):
    """Readiness check - can the application serve traffic?

    Checks:
    - record store initialized
    - view templates loadable

    **Returns:**
    - 200: Application is ready to serve requests
    - 503: Application is not ready
    """
    checks = {}
    all_healthy = True

    checks["record_store"] = "ok" if store.is_ready else "not_ready"
    if not store.is_ready:
        all_healthy = False

    try:
        for name in REQUIRED_TEMPLATES:
            templates.env.get_template(name)
        checks["templates"] = "ok"
    except TemplateNotFound as e:
        checks["templates"] = f"missing: {e.name}"
        all_healthy = False

    status_code = 200 if all_healthy else 503
    status = "healthy" if all_healthy else "unhealthy"

    return JSONResponse(
        status_code=status_code,
        content=DetailedHealthResponse(
            status=status,
            version=__version__,
            timestamp=datetime.now(UTC),
            checks=checks,
        ).model_dump(mode="json"),
    )
