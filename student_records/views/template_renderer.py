"""Template rendering for the student record views."""

from collections.abc import Mapping, Sequence
from datetime import date, datetime
from pathlib import Path

from fastapi.templating import Jinja2Templates
from markupsafe import Markup

from student_records.config import Settings
from student_records.exceptions import ConfigurationException, ErrorCode
from student_records.logging_config import get_logger, log_with_context
from student_records.models.student import FORM_FIELDS, StudentRecord
from student_records.protocols import UrlBuilder

logger = get_logger(__name__)

TEMPLATES_DIR = Path(__file__).parent.parent / "templates"
templates = Jinja2Templates(directory=TEMPLATES_DIR)

NOT_SPECIFIED = "not specified"
DEFAULT_STYLESHEET_URL = "/static/css/students.css"


def format_date(value: date | None) -> str:
    """Format a date as YYYY-MM-DD (empty string for None)."""
    return value.strftime("%Y-%m-%d") if value is not None else ""


def format_datetime(value: datetime | None) -> str:
    """Format a timestamp as YYYY-MM-DD HH:MM (empty string for None)."""
    return value.strftime("%Y-%m-%d %H:%M") if value is not None else ""


templates.env.filters["ymd"] = format_date
templates.env.filters["ymd_hm"] = format_datetime


def resolve_form_values(
    record: StudentRecord | None,
    resubmitted_values: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Pick the value shown in each form input.

    A resubmitted value wins whenever its key is present (even if blank),
    then the stored value, then an empty string.
    """
    resubmitted_values = resubmitted_values or {}
    values: dict[str, str] = {}
    for field in FORM_FIELDS:
        if field.name in resubmitted_values:
            values[field.name] = resubmitted_values[field.name]
            continue
        stored = getattr(record, field.name, None) if record is not None else None
        if stored is None:
            values[field.name] = ""
        elif isinstance(stored, date):
            values[field.name] = format_date(stored)
        else:
            values[field.name] = str(stored)
    return values


class RecordViewRenderer:
    """Renders the list, detail, create and edit views as complete HTML documents.

    Rendering is pure: every call takes a snapshot of the data it shows plus
    the outputs of its collaborators (URL builder, CSRF token, pagination
    markup, flash message) and returns a string. Records are never modified.
    """

    def __init__(
        self,
        placeholder: str = NOT_SPECIFIED,
        app_title: str = "Student Management System",
        lang: str = "en",
        direction: str = "ltr",
        stylesheet_url: str = DEFAULT_STYLESHEET_URL,
        template_dir: Path = TEMPLATES_DIR,
    ):
        if not template_dir.is_dir():
            raise ConfigurationException(
                "Template directory not found",
                code=ErrorCode.CONFIG_INVALID,
                details={"template_dir": str(template_dir)},
            )
        self._env = templates.env if template_dir == TEMPLATES_DIR else Jinja2Templates(directory=template_dir).env
        self._env.filters.setdefault("ymd", format_date)
        self._env.filters.setdefault("ymd_hm", format_datetime)
        self.placeholder = placeholder
        self.app_title = app_title
        self.lang = lang
        self.direction = direction
        self.stylesheet_url = stylesheet_url

    @classmethod
    def from_settings(cls, settings: Settings) -> "RecordViewRenderer":
        """Build a renderer configured from application settings."""
        return cls(
            placeholder=settings.placeholder_text,
            app_title=settings.app_title,
            lang=settings.html_lang,
            direction=settings.text_direction,
        )

    def _render(self, template_name: str, **context) -> str:
        html = self._env.get_template(template_name).render(
            app_title=self.app_title,
            lang=self.lang,
            direction=self.direction,
            placeholder=self.placeholder,
            stylesheet_url=self.stylesheet_url,
            **context,
        )
        log_with_context(
            logger,
            "debug",
            "View rendered",
            template=template_name,
            size=len(html),
            event_type="view_rendered",
        )
        return html

    def render_list(
        self,
        records: Sequence[StudentRecord],
        pagination: str = "",
        flash_message: str | None = None,
        *,
        url_for: UrlBuilder,
        csrf_token: str,
    ) -> str:
        """Render the student list.

        Args:
            records: Records to show, one row each, in the given order
            pagination: Navigation markup, embedded verbatim
            flash_message: One-shot success notice shown above the content
            url_for: Route-URL builder
            csrf_token: Token for the per-row delete forms

        Returns:
            Complete HTML document
        """
        return self._render(
            "students/index.html",
            records=list(records),
            pagination=Markup(pagination),
            flash_message=flash_message,
            url_for=url_for,
            csrf_token=csrf_token,
        )

    def render_detail(self, record: StudentRecord, *, url_for: UrlBuilder) -> str:
        """Render every field of one record as label/value pairs.

        Args:
            record: Record to show
            url_for: Route-URL builder

        Returns:
            Complete HTML document
        """
        return self._render("students/show.html", record=record, url_for=url_for)

    def render_edit_form(
        self,
        record: StudentRecord,
        errors: Mapping[str, str] | None = None,
        resubmitted_values: Mapping[str, str] | None = None,
        *,
        url_for: UrlBuilder,
        csrf_token: str,
    ) -> str:
        """Render the edit form for one record.

        Args:
            record: Record being edited
            errors: Validation message per field name
            resubmitted_values: Values the user submitted before validation failed
            url_for: Route-URL builder
            csrf_token: Token embedded in the form

        Returns:
            Complete HTML document
        """
        return self._render(
            "students/edit.html",
            record=record,
            fields=FORM_FIELDS,
            values=resolve_form_values(record, resubmitted_values),
            errors=dict(errors or {}),
            url_for=url_for,
            csrf_token=csrf_token,
        )

    def render_create_form(
        self,
        errors: Mapping[str, str] | None = None,
        resubmitted_values: Mapping[str, str] | None = None,
        *,
        url_for: UrlBuilder,
        csrf_token: str,
    ) -> str:
        """Render the empty (or resubmitted) form for a new record."""
        return self._render(
            "students/create.html",
            fields=FORM_FIELDS,
            values=resolve_form_values(None, resubmitted_values),
            errors=dict(errors or {}),
            url_for=url_for,
            csrf_token=csrf_token,
        )

    def render_error(self, status_code: int, message: str, back_url: str = "/") -> str:
        """Render an error page in the shared layout."""
        return self._render("error.html", status_code=status_code, message=message, back_url=back_url)
