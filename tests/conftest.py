"""Pytest configuration and shared fixtures."""

import re
from datetime import date, datetime

import pytest
from fastapi.testclient import TestClient

from student_records.config import Settings, get_settings
from student_records.core.app_factory import create_app
from student_records.models.student import StudentRecord
from student_records.views.template_renderer import RecordViewRenderer

CSRF_PATTERN = re.compile(r'name="_token" value="([^"]+)"')


def fake_url_for(name: str, /, **path_params) -> str:
    """Route-URL builder that mirrors the app's route layout without a request."""
    student_id = path_params.get("student_id")
    routes = {
        "students.index": "/students",
        "students.create": "/students/create",
        "students.store": "/students",
        "students.show": f"/students/{student_id}",
        "students.edit": f"/students/{student_id}/edit",
        "students.update": f"/students/{student_id}",
        "students.destroy": f"/students/{student_id}",
    }
    return routes[name]


@pytest.fixture
def test_settings():
    """Settings instance with test values."""
    return Settings(
        secret_key="test-secret-key-for-csrf",
        trusted_hosts="testserver,localhost",
        rate_limit_default="1000/minute",
        per_page=2,
    )


@pytest.fixture
def app(test_settings):
    """FastAPI app configured with test settings."""
    application = create_app(test_settings)
    application.dependency_overrides[get_settings] = lambda: test_settings
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def test_client(app):
    """FastAPI test client with lifespan context."""
    with TestClient(app) as client:
        yield client


@pytest.fixture
def csrf_token(test_client):
    """A valid CSRF token taken from the rendered create form."""
    response = test_client.get("/students/create")
    return CSRF_PATTERN.search(response.text).group(1)


@pytest.fixture
def renderer():
    """Renderer with default presentation settings."""
    return RecordViewRenderer()


@pytest.fixture
def full_record():
    """Student record with every optional field filled in."""
    return StudentRecord(
        id=7,
        name="Layla Haddad",
        email="layla@school.edu",
        student_id="S-1007",
        phone="+962 79 555 0100",
        address="12 Garden Street",
        birth_date=date(2002, 3, 9),
        major="Computer Science",
        created_at=datetime(2024, 9, 1, 8, 5, 42),
    )


@pytest.fixture
def bare_record():
    """Student record with only the required fields."""
    return StudentRecord(
        id=8,
        name="Omar Nasser",
        email="omar@school.edu",
        student_id="S-1008",
        created_at=datetime(2024, 9, 2, 14, 30),
    )


@pytest.fixture
def student_form_data():
    """Valid submitted form data for a new student."""
    return {
        "name": "Sara Khalil",
        "email": "sara@school.edu",
        "student_id": "S-2001",
        "phone": "",
        "address": "",
        "birth_date": "2001-11-23",
        "major": "Mathematics",
    }
