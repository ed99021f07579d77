"""Page-window computation and pagination link markup for the student list."""

from markupsafe import Markup
from pydantic import BaseModel, Field, computed_field

from student_records.models.student import StudentRecord
from student_records.protocols import UrlBuilder


class Page(BaseModel):
    """One page of student records."""

    items: list[StudentRecord]
    page: int = Field(ge=1)
    per_page: int = Field(ge=1)
    total: int = Field(ge=0)

    @computed_field
    @property
    def last_page(self) -> int:
        return max(1, -(-self.total // self.per_page))

    @computed_field
    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @computed_field
    @property
    def has_next(self) -> bool:
        return self.page < self.last_page


def clamp_page(page: int, total: int, per_page: int) -> int:
    """Clamp a requested page number into the valid range for this record count."""
    last_page = max(1, -(-total // per_page))
    return min(max(page, 1), last_page)


def render_pagination_links(page: Page, url_for: UrlBuilder) -> Markup:
    """Build navigation markup for a page of records.

    Args:
        page: Current page
        url_for: Route-URL builder used for the list action

    Returns:
        Ready-to-embed markup, empty when everything fits on one page
    """
    if page.last_page <= 1:
        return Markup("")

    def link(number: int, text: str, rel: str | None = None) -> Markup:
        href = f"{url_for('students.index')}?page={number}"
        rel_attr = Markup(' rel="{}"').format(rel) if rel else Markup("")
        return Markup('<a href="{}"{}>{}</a>').format(href, rel_attr, text)

    parts: list[Markup] = []
    if page.has_previous:
        parts.append(link(page.page - 1, "«", "prev"))
    for number in range(1, page.last_page + 1):
        if number == page.page:
            parts.append(Markup('<span class="active" aria-current="page">{}</span>').format(number))
        else:
            parts.append(link(number, str(number)))
    if page.has_next:
        parts.append(link(page.page + 1, "»", "next"))

    return Markup('<nav role="navigation" aria-label="Pagination">{}</nav>').format(Markup("").join(parts))
