"""State managers for handling application-wide mutable state.

This module provides async-safe state management using asyncio.Lock.
All state managers inherit from StateManager ABC.
"""

import asyncio
from abc import ABC, abstractmethod
from datetime import datetime

from student_records.exceptions import DuplicateStudentIdException, RecordNotFoundException
from student_records.models.student import StudentForm, StudentRecord
from student_records.pagination import Page, clamp_page


class StateManager(ABC):
    """Base class for all state managers.

    State managers provide async-safe access to mutable application state.
    All subclasses must implement lifecycle methods.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the state manager (called during app startup)."""
        pass

    @abstractmethod
    async def cleanup(self) -> None:
        """Cleanup resources (called during app shutdown)."""
        pass


class StudentRecordStore(StateManager):
    """In-memory store of student records.

    Records keep insertion order. Ids are assigned from 1 and never reused,
    even after a delete.
    """

    def __init__(self):
        """Initialize an empty store."""
        self._records: dict[int, StudentRecord] = {}
        self._next_id: int = 1
        self._lock = asyncio.Lock()
        self._ready = False

    async def initialize(self) -> None:
        """Mark the store as ready to serve requests."""
        async with self._lock:
            self._ready = True

    async def cleanup(self) -> None:
        """Drop all records on shutdown."""
        async with self._lock:
            self._records.clear()
            self._ready = False

    @property
    def is_ready(self) -> bool:
        return self._ready

    async def count(self) -> int:
        async with self._lock:
            return len(self._records)

    async def list_all(self) -> list[StudentRecord]:
        """Get all records in insertion order."""
        async with self._lock:
            return list(self._records.values())

    async def page(self, page: int, per_page: int) -> Page:
        """Get one page of records in insertion order.

        Out of range page numbers are clamped to the first or last page.

        Args:
            page: Requested page number (1-based)
            per_page: Records per page

        Returns:
            Page with its records and the total record count
        """
        async with self._lock:
            records = list(self._records.values())
            number = clamp_page(page, len(records), per_page)
            offset = (number - 1) * per_page
            return Page(
                items=records[offset : offset + per_page],
                page=number,
                per_page=per_page,
                total=len(records),
            )

    async def get(self, record_id: int) -> StudentRecord:
        """Get a record by id.

        Raises:
            RecordNotFoundException: If no record has this id
        """
        async with self._lock:
            record = self._records.get(record_id)
            if record is None:
                raise RecordNotFoundException(record_id)
            return record

    async def create(self, form: StudentForm) -> StudentRecord:
        """Store a new record built from validated form data.

        Returns:
            The stored record with its assigned id and creation time

        Raises:
            DuplicateStudentIdException: If another record uses the student id
        """
        async with self._lock:
            if self._student_id_taken(form.student_id):
                raise DuplicateStudentIdException(form.student_id)
            record = StudentRecord(
                id=self._next_id,
                created_at=datetime.now(),
                **form.model_dump(),
            )
            self._records[record.id] = record
            self._next_id += 1
            return record

    async def update(self, record_id: int, form: StudentForm) -> StudentRecord:
        """Replace a record's fields, keeping its id and creation time.

        Raises:
            RecordNotFoundException: If no record has this id
            DuplicateStudentIdException: If another record uses the student id
        """
        async with self._lock:
            existing = self._records.get(record_id)
            if existing is None:
                raise RecordNotFoundException(record_id)
            if self._student_id_taken(form.student_id, exclude_id=record_id):
                raise DuplicateStudentIdException(form.student_id)
            record = existing.model_copy(update=form.model_dump())
            self._records[record_id] = record
            return record

    async def delete(self, record_id: int) -> StudentRecord:
        """Remove a record.

        Returns:
            The removed record

        Raises:
            RecordNotFoundException: If no record has this id
        """
        async with self._lock:
            record = self._records.pop(record_id, None)
            if record is None:
                raise RecordNotFoundException(record_id)
            return record

    async def student_id_taken(self, student_id: str, exclude_id: int | None = None) -> bool:
        """Check whether another record already uses this student id.

        Args:
            student_id: Student id to look for
            exclude_id: Record id to ignore (the record being edited)
        """
        async with self._lock:
            return self._student_id_taken(student_id, exclude_id)

    def _student_id_taken(self, student_id: str, exclude_id: int | None = None) -> bool:
        # Caller must hold the lock.
        return any(
            record.student_id == student_id and record.id != exclude_id for record in self._records.values()
        )
