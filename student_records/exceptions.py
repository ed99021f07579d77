"""Custom exceptions for Student Records with proper HTTP status codes."""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes for structured error responses."""

    # Generic errors
    STUDENT_RECORDS_ERROR = "STUDENT_RECORDS_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Record errors
    RECORD_NOT_FOUND = "RECORD_NOT_FOUND"
    STUDENT_ID_TAKEN = "STUDENT_ID_TAKEN"

    # Request errors
    CSRF_TOKEN_MISSING = "CSRF_TOKEN_MISSING"
    CSRF_TOKEN_INVALID = "CSRF_TOKEN_INVALID"
    CSRF_TOKEN_EXPIRED = "CSRF_TOKEN_EXPIRED"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"

    # Configuration errors
    CONFIG_ERROR = "CONFIG_ERROR"
    CONFIG_INVALID = "CONFIG_INVALID"


class StudentRecordsException(Exception):
    """Base exception for student records errors with HTTP status code support.

    All custom exceptions inherit from this class so the error handlers can
    render them consistently.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.STUDENT_RECORDS_ERROR,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        """Initialize student records exception.

        Args:
            message: Human-readable error message
            code: Error code from ErrorCode enum
            status_code: HTTP status code (default 500)
            details: Additional error context/details
        """
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class RecordNotFoundException(StudentRecordsException):
    """Requested student record does not exist."""

    def __init__(self, record_id: int, details: dict[str, Any] | None = None):
        super().__init__(
            f"Student record {record_id} not found",
            code=ErrorCode.RECORD_NOT_FOUND,
            status_code=404,
            details={"record_id": record_id, **(details or {})},
        )
        self.record_id = record_id


class DuplicateStudentIdException(StudentRecordsException):
    """Another record already uses this student id."""

    def __init__(self, student_id: str, details: dict[str, Any] | None = None):
        super().__init__(
            f"Student id {student_id} is already taken",
            code=ErrorCode.STUDENT_ID_TAKEN,
            status_code=409,
            details={"student_id": student_id, **(details or {})},
        )
        self.student_id = student_id


class CSRFException(StudentRecordsException):
    """CSRF token missing, tampered with or expired."""

    def __init__(
        self,
        message: str = "Invalid CSRF token",
        code: ErrorCode = ErrorCode.CSRF_TOKEN_INVALID,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code=code, status_code=403, details=details)


class MethodNotAllowedException(StudentRecordsException):
    """Unsupported method-override value on a form submission."""

    def __init__(self, method: str, details: dict[str, Any] | None = None):
        super().__init__(
            f"Method {method or '(none)'} not allowed",
            code=ErrorCode.METHOD_NOT_ALLOWED,
            status_code=405,
            details={"method": method, **(details or {})},
        )


class ConfigurationException(StudentRecordsException):
    """Configuration errors."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.CONFIG_ERROR,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code, status_code, details)
