"""Student Records models"""

from student_records.models.base_models import DetailedHealthResponse, HealthResponse
from student_records.models.student import FORM_FIELDS, FormField, StudentForm, StudentRecord

__all__ = [
    "DetailedHealthResponse",
    "HealthResponse",
    "FORM_FIELDS",
    "FormField",
    "StudentForm",
    "StudentRecord",
]
