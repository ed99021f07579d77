"""Pydantic models for student records and the student form."""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class StudentRecord(BaseModel):
    """A stored student record.

    Records are immutable snapshots; the store hands out new instances on update.
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=1)
    name: str
    email: str
    student_id: str
    phone: str | None = None
    address: str | None = None
    birth_date: date | None = None
    major: str | None = None
    created_at: datetime


class StudentForm(BaseModel):
    """Submitted student form data, validated before it reaches the store."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    student_id: str = Field(min_length=1, max_length=50)
    phone: str | None = Field(default=None, max_length=30)
    address: str | None = Field(default=None, max_length=255)
    birth_date: date | None = None
    major: str | None = Field(default=None, max_length=255)

    @field_validator("phone", "address", "major", "birth_date", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        """Treat empty form inputs as absent optional values."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("birth_date", mode="after")
    @classmethod
    def validate_birth_date(cls, v: date | None) -> date | None:
        """Reject birth dates in the future."""
        if v is not None and v > date.today():
            raise ValueError("birth date cannot be in the future")
        return v


class FormField(BaseModel):
    """Describes one input of the student form."""

    model_config = ConfigDict(frozen=True)

    name: str
    label: str
    input_type: str = "text"
    required: bool = False


FORM_FIELDS: tuple[FormField, ...] = (
    FormField(name="name", label="Name", required=True),
    FormField(name="email", label="Email", input_type="email", required=True),
    FormField(name="student_id", label="Student ID", required=True),
    FormField(name="phone", label="Phone"),
    FormField(name="address", label="Address"),
    FormField(name="birth_date", label="Birth date", input_type="date"),
    FormField(name="major", label="Major"),
)
