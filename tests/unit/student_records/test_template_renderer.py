"""Tests for the student record view renderer."""

import re
from datetime import date, datetime

import pytest
from markupsafe import Markup

from student_records.exceptions import ConfigurationException
from student_records.models.student import StudentRecord
from student_records.views.template_renderer import (
    NOT_SPECIFIED,
    RecordViewRenderer,
    format_date,
    format_datetime,
    resolve_form_values,
)
from tests.conftest import fake_url_for


def detail_value(html: str, field: str) -> str:
    match = re.search(rf'<span class="info-value" data-field="{field}">(.*?)</span>', html, re.S)
    assert match, f"no detail value for {field}"
    return match.group(1).strip()


def input_value(html: str, field: str) -> str:
    match = re.search(rf'<input [^>]*id="{field}"[^>]*value="([^"]*)"', html)
    assert match, f"no input for {field}"
    return match.group(1)


def make_record(record_id: int, name: str) -> StudentRecord:
    return StudentRecord(
        id=record_id,
        name=name,
        email=f"{name.lower()}@school.edu",
        student_id=f"S-{record_id:04d}",
        created_at=datetime(2024, 1, record_id, 9, 0),
    )


class TestFormatting:
    """Tests for date formatting helpers."""

    def test_format_date(self):
        assert format_date(date(2001, 2, 3)) == "2001-02-03"
        assert format_date(None) == ""

    def test_format_datetime_drops_seconds(self):
        assert format_datetime(datetime(2024, 9, 1, 8, 5, 42)) == "2024-09-01 08:05"


class TestRenderList:
    """Tests for the list view."""

    def test_empty_sequence_shows_empty_state_without_table(self, renderer):
        html = renderer.render_list([], url_for=fake_url_for, csrf_token="tok")

        assert '<div class="no-data">' in html
        assert "<table>" not in html
        assert "data-record-id" not in html

    def test_one_row_per_record_in_input_order(self, renderer):
        records = [make_record(3, "Zaid"), make_record(1, "Amal"), make_record(2, "Huda")]

        html = renderer.render_list(records, url_for=fake_url_for, csrf_token="tok")

        row_ids = re.findall(r'<tr data-record-id="(\d+)">', html)
        assert row_ids == ["3", "1", "2"]
        assert '<div class="no-data">' not in html

    def test_absent_phone_and_major_show_placeholder(self, renderer, bare_record):
        html = renderer.render_list([bare_record], url_for=fake_url_for, csrf_token="tok")

        assert html.count(f"<td>{NOT_SPECIFIED}</td>") == 2

    def test_flash_message_rendered_once(self, renderer, full_record):
        html = renderer.render_list(
            [full_record], flash_message="Student added successfully.", url_for=fake_url_for, csrf_token="tok"
        )

        assert html.count("Student added successfully.") == 1
        assert html.index('class="alert"') < html.index("<table>")

    def test_no_flash_block_without_message(self, renderer, full_record):
        html = renderer.render_list([full_record], url_for=fake_url_for, csrf_token="tok")

        assert 'class="alert"' not in html

    def test_flash_message_is_escaped(self, renderer):
        html = renderer.render_list([], flash_message="<b>hi</b>", url_for=fake_url_for, csrf_token="tok")

        assert "&lt;b&gt;hi&lt;/b&gt;" in html

    def test_pagination_markup_embedded_verbatim(self, renderer, full_record):
        links = '<nav><a href="/students?page=2" rel="next">»</a></nav>'

        html = renderer.render_list([full_record], links, url_for=fake_url_for, csrf_token="tok")

        assert links in html

    def test_row_actions_and_delete_form(self, renderer, full_record):
        html = renderer.render_list([full_record], url_for=fake_url_for, csrf_token="tok-123")

        assert 'href="/students/7"' in html
        assert 'href="/students/7/edit"' in html
        assert 'action="/students/7" method="POST"' in html
        assert '<input type="hidden" name="_method" value="DELETE">' in html
        assert '<input type="hidden" name="_token" value="tok-123">' in html
        assert 'href="/students/create"' in html

    def test_record_values_are_escaped(self, renderer):
        record = make_record(1, "Amal")
        record = record.model_copy(update={"name": "<script>alert(1)</script>"})

        html = renderer.render_list([record], url_for=fake_url_for, csrf_token="tok")

        assert "<script>alert(1)</script>" not in html
        assert "&lt;script&gt;" in html


class TestRenderDetail:
    """Tests for the detail view."""

    def test_all_fields_rendered(self, renderer, full_record):
        html = renderer.render_detail(full_record, url_for=fake_url_for)

        assert detail_value(html, "name") == "Layla Haddad"
        assert detail_value(html, "email") == "layla@school.edu"
        assert detail_value(html, "student_id") == "S-1007"
        assert detail_value(html, "phone") == "+962 79 555 0100"
        assert detail_value(html, "address") == "12 Garden Street"
        assert detail_value(html, "major") == "Computer Science"

    def test_optional_fields_absent_show_placeholder(self, renderer, bare_record):
        html = renderer.render_detail(bare_record, url_for=fake_url_for)

        for field in ("phone", "address", "birth_date", "major"):
            assert detail_value(html, field) == NOT_SPECIFIED

    def test_birth_date_formatted(self, renderer, full_record):
        html = renderer.render_detail(full_record, url_for=fake_url_for)

        assert detail_value(html, "birth_date") == full_record.birth_date.strftime("%Y-%m-%d")

    def test_created_at_formatted_to_minutes(self, renderer, full_record):
        html = renderer.render_detail(full_record, url_for=fake_url_for)

        assert detail_value(html, "created_at") == "2024-09-01 08:05"

    def test_custom_placeholder(self, bare_record):
        renderer = RecordViewRenderer(placeholder="غير محدد", lang="ar", direction="rtl")

        html = renderer.render_detail(bare_record, url_for=fake_url_for)

        assert detail_value(html, "major") == "غير محدد"
        assert '<html lang="ar" dir="rtl">' in html

    def test_edit_and_back_links(self, renderer, full_record):
        html = renderer.render_detail(full_record, url_for=fake_url_for)

        assert 'href="/students/7/edit"' in html
        assert 'href="/students"' in html

    def test_detail_does_not_mutate_record(self, renderer, full_record):
        before = full_record.model_dump()

        renderer.render_detail(full_record, url_for=fake_url_for)

        assert full_record.model_dump() == before


class TestRenderEditForm:
    """Tests for the edit form."""

    def test_required_fields_marked_required(self, renderer, full_record):
        html = renderer.render_edit_form(full_record, url_for=fake_url_for, csrf_token="tok")

        for field in ("name", "email", "student_id"):
            assert re.search(rf'<input [^>]*id="{field}"[^>]*required>', html)
        for field in ("phone", "address", "birth_date", "major"):
            tag = re.search(rf'<input [^>]*id="{field}"[^>]*>', html).group(0)
            assert "required" not in tag

    def test_stored_values_populate_inputs(self, renderer, full_record):
        html = renderer.render_edit_form(full_record, url_for=fake_url_for, csrf_token="tok")

        assert input_value(html, "name") == "Layla Haddad"
        assert input_value(html, "birth_date") == "2002-03-09"

    def test_absent_optional_values_are_empty(self, renderer, bare_record):
        html = renderer.render_edit_form(bare_record, url_for=fake_url_for, csrf_token="tok")

        assert input_value(html, "phone") == ""
        assert input_value(html, "birth_date") == ""

    def test_resubmitted_value_wins_over_stored(self, renderer, full_record):
        record = full_record.model_copy(update={"name": "Y"})

        html = renderer.render_edit_form(record, resubmitted_values={"name": "X"}, url_for=fake_url_for, csrf_token="tok")

        assert input_value(html, "name") == "X"
        assert input_value(html, "email") == "layla@school.edu"

    def test_error_shown_directly_under_its_field_only(self, renderer, full_record):
        html = renderer.render_edit_form(
            full_record, errors={"email": "invalid format"}, url_for=fake_url_for, csrf_token="tok"
        )

        assert re.search(
            r'<input [^>]*id="email"[^>]*>\s*<div class="error" data-error-for="email">invalid format</div>', html
        )
        assert re.findall(r'data-error-for="([^"]+)"', html) == ["email"]

    def test_no_errors_no_messages(self, renderer, full_record):
        html = renderer.render_edit_form(full_record, url_for=fake_url_for, csrf_token="tok")

        assert 'class="error"' not in html

    def test_form_targets_update_with_tokens(self, renderer, full_record):
        html = renderer.render_edit_form(full_record, url_for=fake_url_for, csrf_token="tok-9")

        assert '<form action="/students/7" method="POST">' in html
        assert '<input type="hidden" name="_method" value="PUT">' in html
        assert '<input type="hidden" name="_token" value="tok-9">' in html
        assert 'href="/students" class="btn btn-secondary"' in html


class TestRenderCreateForm:
    """Tests for the create form."""

    def test_empty_form_posts_to_store(self, renderer):
        html = renderer.render_create_form(url_for=fake_url_for, csrf_token="tok")

        assert '<form action="/students" method="POST">' in html
        assert 'name="_method"' not in html
        assert input_value(html, "name") == ""

    def test_resubmitted_values_and_errors(self, renderer):
        html = renderer.render_create_form(
            errors={"name": "The name field is required."},
            resubmitted_values={"name": "", "email": "sara@school.edu"},
            url_for=fake_url_for,
            csrf_token="tok",
        )

        assert input_value(html, "email") == "sara@school.edu"
        assert 'data-error-for="name">The name field is required.</div>' in html


class TestResolveFormValues:
    """Tests for form value precedence."""

    def test_blank_resubmitted_value_still_wins(self, full_record):
        values = resolve_form_values(full_record, {"major": ""})

        assert values["major"] == ""

    def test_without_record_everything_empty(self):
        values = resolve_form_values(None)

        assert set(values.values()) == {""}


class TestRenderError:
    """Tests for the error page."""

    def test_error_page(self, renderer):
        html = renderer.render_error(404, "Student record 3 not found", back_url="/students")

        assert "Error 404" in html
        assert "Student record 3 not found" in html
        assert 'href="/students"' in html


def test_missing_template_dir_raises(tmp_path):
    with pytest.raises(ConfigurationException):
        RecordViewRenderer(template_dir=tmp_path / "missing")


def test_pagination_markup_object_accepted(renderer, full_record):
    html = renderer.render_list([full_record], Markup("<nav>pages</nav>"), url_for=fake_url_for, csrf_token="tok")

    assert "<nav>pages</nav>" in html
