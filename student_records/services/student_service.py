"""Student form validation and record operations."""

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from student_records.logging_config import get_logger, log_with_context
from student_records.models.student import FORM_FIELDS, StudentForm, StudentRecord
from student_records.state_managers import StudentRecordStore

logger = get_logger(__name__)

FIELD_LABELS = {field.name: field.label.lower() for field in FORM_FIELDS}
REQUIRED_FIELDS = frozenset(field.name for field in FORM_FIELDS if field.required)
STUDENT_ID_TAKEN = "The student id has already been taken."


def form_values(data: Mapping[str, Any]) -> dict[str, str]:
    """Keep only the student form inputs from submitted form data, as strings."""
    return {field.name: str(data[field.name]) for field in FORM_FIELDS if field.name in data}


def _error_message(field: str, error: Mapping[str, Any]) -> str:
    """Turn one pydantic error into the message shown under a form input."""
    label = FIELD_LABELS.get(field, field)
    error_type = error.get("type", "")

    blank = error_type != "missing" and not str(error.get("input") or "").strip()
    if error_type in ("missing", "string_too_short") or (field in REQUIRED_FIELDS and blank):
        return f"The {label} field is required."
    if error_type == "string_too_long":
        return f"The {label} may not be greater than {error['ctx']['max_length']} characters."
    if field == "email":
        return "The email must be a valid email address."
    if field == "birth_date" and error_type.startswith("date"):
        return "The birth date is not a valid date."

    message = str(error.get("msg", "is invalid"))
    return message.removeprefix("Value error, ").capitalize() + "."


def validation_errors(exc: ValidationError) -> dict[str, str]:
    """Map a pydantic ValidationError to the first message per field."""
    errors: dict[str, str] = {}
    for error in exc.errors():
        loc = error.get("loc") or ("__all__",)
        field = str(loc[0])
        errors.setdefault(field, _error_message(field, error))
    return errors


async def validate_student_form(
    data: Mapping[str, Any],
    store: StudentRecordStore,
    exclude_id: int | None = None,
) -> tuple[StudentForm | None, dict[str, str]]:
    """Validate submitted form data against the field rules and the record set.

    Args:
        data: Submitted form data
        store: Record store used for the student id uniqueness check
        exclude_id: Id of the record being edited, if any

    Returns:
        Tuple of (validated form or None, errors by field name)
    """
    values = form_values(data)
    form: StudentForm | None = None
    try:
        form = StudentForm.model_validate(values)
        errors: dict[str, str] = {}
    except ValidationError as e:
        errors = validation_errors(e)

    student_id = form.student_id if form else values.get("student_id", "").strip()
    if "student_id" not in errors and student_id and await store.student_id_taken(student_id, exclude_id):
        errors["student_id"] = STUDENT_ID_TAKEN

    if errors:
        log_with_context(
            logger,
            "info",
            "Student form validation failed",
            fields=sorted(errors),
            record_id=exclude_id,
            event_type="validation_failed",
        )
        return None, errors
    return form, errors


async def create_student(store: StudentRecordStore, form: StudentForm) -> StudentRecord:
    """Store a new student record."""
    record = await store.create(form)
    log_with_context(
        logger,
        "info",
        "Student record created",
        record_id=record.id,
        event_type="record_created",
    )
    return record


async def update_student(store: StudentRecordStore, record_id: int, form: StudentForm) -> StudentRecord:
    """Update an existing student record."""
    record = await store.update(record_id, form)
    log_with_context(
        logger,
        "info",
        "Student record updated",
        record_id=record.id,
        event_type="record_updated",
    )
    return record


async def delete_student(store: StudentRecordStore, record_id: int) -> StudentRecord:
    """Delete a student record."""
    record = await store.delete(record_id)
    log_with_context(
        logger,
        "info",
        "Student record deleted",
        record_id=record.id,
        event_type="record_deleted",
    )
    return record
