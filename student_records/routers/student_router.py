"""Student record routes: HTML pages and form submissions."""

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from student_records.config import Settings, get_settings
from student_records.dependencies import get_renderer, get_student_store, get_url_builder
from student_records.exceptions import DuplicateStudentIdException, MethodNotAllowedException
from student_records.flash import clear_flash, read_flash, set_flash
from student_records.pagination import render_pagination_links
from student_records.protocols import UrlBuilder
from student_records.security import issue_csrf_token, verify_csrf
from student_records.services import student_service
from student_records.state_managers import StudentRecordStore
from student_records.views.template_renderer import RecordViewRenderer

router = APIRouter()

METHOD_FIELD_NAME = "_method"


def _redirect_to_index(url_for: UrlBuilder, message: str) -> RedirectResponse:
    response = RedirectResponse(url=url_for("students.index"), status_code=303)
    set_flash(response, message)
    return response


@router.get("/", include_in_schema=False)
async def root(url_for: UrlBuilder = Depends(get_url_builder)):
    """Send visitors to the student list."""
    return RedirectResponse(url=url_for("students.index"), status_code=307)


@router.get("/students", response_class=HTMLResponse, name="students.index")
async def index(
    request: Request,
    page: int = Query(default=1, description="Page number (clamped to the valid range)"),
    store: StudentRecordStore = Depends(get_student_store),
    renderer: RecordViewRenderer = Depends(get_renderer),
    url_for: UrlBuilder = Depends(get_url_builder),
    settings: Settings = Depends(get_settings),
):
    """Render the paginated student list."""
    current = await store.page(page, settings.per_page)
    flash_message = read_flash(request)

    response = HTMLResponse(
        renderer.render_list(
            current.items,
            render_pagination_links(current, url_for),
            flash_message,
            url_for=url_for,
            csrf_token=issue_csrf_token(settings),
        )
    )
    if flash_message is not None:
        clear_flash(response)
    return response


@router.get("/students/create", response_class=HTMLResponse, name="students.create")
async def create(
    renderer: RecordViewRenderer = Depends(get_renderer),
    url_for: UrlBuilder = Depends(get_url_builder),
    settings: Settings = Depends(get_settings),
):
    """Render the empty form for a new student."""
    return HTMLResponse(renderer.render_create_form(url_for=url_for, csrf_token=issue_csrf_token(settings)))


@router.post(
    "/students",
    response_class=HTMLResponse,
    name="students.store",
    dependencies=[Depends(verify_csrf)],
)
async def store_student(
    request: Request,
    store: StudentRecordStore = Depends(get_student_store),
    renderer: RecordViewRenderer = Depends(get_renderer),
    url_for: UrlBuilder = Depends(get_url_builder),
    settings: Settings = Depends(get_settings),
):
    """Validate and store a new student, or redisplay the form with errors."""
    data = await request.form()
    form, errors = await student_service.validate_student_form(data, store)
    if form is not None:
        try:
            await student_service.create_student(store, form)
        except DuplicateStudentIdException:
            errors = {"student_id": student_service.STUDENT_ID_TAKEN}
        else:
            return _redirect_to_index(url_for, "Student added successfully.")

    return HTMLResponse(
        renderer.render_create_form(
            errors,
            student_service.form_values(data),
            url_for=url_for,
            csrf_token=issue_csrf_token(settings),
        ),
        status_code=422,
    )


@router.get("/students/{student_id}", response_class=HTMLResponse, name="students.show")
async def show(
    student_id: int,
    store: StudentRecordStore = Depends(get_student_store),
    renderer: RecordViewRenderer = Depends(get_renderer),
    url_for: UrlBuilder = Depends(get_url_builder),
):
    """Render one student's details."""
    record = await store.get(student_id)
    return HTMLResponse(renderer.render_detail(record, url_for=url_for))


@router.get("/students/{student_id}/edit", response_class=HTMLResponse, name="students.edit")
async def edit(
    student_id: int,
    store: StudentRecordStore = Depends(get_student_store),
    renderer: RecordViewRenderer = Depends(get_renderer),
    url_for: UrlBuilder = Depends(get_url_builder),
    settings: Settings = Depends(get_settings),
):
    """Render the edit form populated from the stored record."""
    record = await store.get(student_id)
    return HTMLResponse(
        renderer.render_edit_form(record, url_for=url_for, csrf_token=issue_csrf_token(settings))
    )


async def _update(
    request: Request,
    student_id: int,
    store: StudentRecordStore,
    renderer: RecordViewRenderer,
    url_for: UrlBuilder,
    settings: Settings,
):
    record = await store.get(student_id)
    data = await request.form()
    form, errors = await student_service.validate_student_form(data, store, exclude_id=student_id)
    if form is not None:
        try:
            await student_service.update_student(store, student_id, form)
        except DuplicateStudentIdException:
            errors = {"student_id": student_service.STUDENT_ID_TAKEN}
        else:
            return _redirect_to_index(url_for, "Student updated successfully.")

    return HTMLResponse(
        renderer.render_edit_form(
            record,
            errors,
            student_service.form_values(data),
            url_for=url_for,
            csrf_token=issue_csrf_token(settings),
        ),
        status_code=422,
    )


async def _destroy(student_id: int, store: StudentRecordStore, url_for: UrlBuilder):
    await student_service.delete_student(store, student_id)
    return _redirect_to_index(url_for, "Student deleted successfully.")


@router.put(
    "/students/{student_id}",
    response_class=HTMLResponse,
    name="students.update",
    dependencies=[Depends(verify_csrf)],
)
async def update(
    request: Request,
    student_id: int,
    store: StudentRecordStore = Depends(get_student_store),
    renderer: RecordViewRenderer = Depends(get_renderer),
    url_for: UrlBuilder = Depends(get_url_builder),
    settings: Settings = Depends(get_settings),
):
    """Validate and apply changes to a student."""
    return await _update(request, student_id, store, renderer, url_for, settings)


@router.delete("/students/{student_id}", name="students.destroy", dependencies=[Depends(verify_csrf)])
async def destroy(
    student_id: int,
    store: StudentRecordStore = Depends(get_student_store),
    url_for: UrlBuilder = Depends(get_url_builder),
):
    """Delete a student."""
    return await _destroy(student_id, store, url_for)


@router.post(
    "/students/{student_id}",
    response_class=HTMLResponse,
    include_in_schema=False,
    dependencies=[Depends(verify_csrf)],
)
async def method_override(
    request: Request,
    student_id: int,
    store: StudentRecordStore = Depends(get_student_store),
    renderer: RecordViewRenderer = Depends(get_renderer),
    url_for: UrlBuilder = Depends(get_url_builder),
    settings: Settings = Depends(get_settings),
):
    """Dispatch HTML form posts carrying a ``_method`` override to update or destroy."""
    data = await request.form()
    method = str(data.get(METHOD_FIELD_NAME, "")).upper()

    if method == "PUT":
        return await _update(request, student_id, store, renderer, url_for, settings)
    if method == "DELETE":
        return await _destroy(student_id, store, url_for)
    raise MethodNotAllowedException(method)
