"""FastAPI dependencies for dependency injection."""

from fastapi import Request

from student_records.protocols import UrlBuilder
from student_records.state_managers import StudentRecordStore
from student_records.views.template_renderer import RecordViewRenderer


async def get_student_store(request: Request) -> StudentRecordStore:
    """
    Get the student record store from app state.

    Args:
        request: The FastAPI request object.

    Returns:
        The shared StudentRecordStore instance.

    Raises:
        RuntimeError: If the store is not initialized.
    """
    store: StudentRecordStore | None = getattr(request.app.state, "student_store", None)

    if store is None:
        raise RuntimeError("Student record store not initialized.")

    return store


async def get_renderer(request: Request) -> RecordViewRenderer:
    """
    Get the view renderer from app state.

    Raises:
        RuntimeError: If the renderer is not initialized.
    """
    renderer: RecordViewRenderer | None = getattr(request.app.state, "renderer", None)

    if renderer is None:
        raise RuntimeError("View renderer not initialized.")

    return renderer


async def get_url_builder(request: Request) -> UrlBuilder:
    """Get a route-URL builder bound to the current request."""

    def url_for(name: str, /, **path_params) -> str:
        return str(request.url_for(name, **path_params))

    return url_for
