"""Domain exceptions.

Every failure the Core can report is an `EnrollmentSystemError` carrying a
stable `ErrorCode` and a small context dict, so the CLI can render one message
per error kind without string matching.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any


class ErrorCode(str, Enum):
    """Stable error codes, one per error kind."""

    DUPLICATE_KEY = "DUPLICATE_KEY"
    NOT_FOUND = "NOT_FOUND"
    COURSE_FULL = "COURSE_FULL"
    ALREADY_ENROLLED = "ALREADY_ENROLLED"
    ENROLLMENT_NOT_FOUND = "ENROLLMENT_NOT_FOUND"
    INVALID_INPUT = "INVALID_INPUT"
    IO_FAILURE = "IO_FAILURE"


class EnrollmentSystemError(Exception):
    """Base class for all recoverable domain errors."""

    error_code: ErrorCode = ErrorCode.INVALID_INPUT

    def __init__(self, message: str, *, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        return self.message


class DuplicateKeyError(EnrollmentSystemError):
    error_code = ErrorCode.DUPLICATE_KEY

    def __init__(self, entity: str, key: str) -> None:
        super().__init__(
            f"{entity.capitalize()} ID already exists: {key}",
            context={"entity": entity, "key": key},
        )


class NotFoundError(EnrollmentSystemError):
    error_code = ErrorCode.NOT_FOUND

    def __init__(self, entity: str, key: str) -> None:
        super().__init__(
            f"{entity.capitalize()} not found: {key}",
            context={"entity": entity, "key": key},
        )


class CourseFullError(EnrollmentSystemError):
    error_code = ErrorCode.COURSE_FULL

    def __init__(self, course_id: str, capacity: int) -> None:
        super().__init__(
            f"Course {course_id} is full (capacity {capacity}). Cannot enroll.",
            context={"course_id": course_id, "capacity": capacity},
        )


class AlreadyEnrolledError(EnrollmentSystemError):
    error_code = ErrorCode.ALREADY_ENROLLED

    def __init__(self, student_id: str, course_id: str) -> None:
        super().__init__(
            f"Student {student_id} is already enrolled in {course_id}.",
            context={"student_id": student_id, "course_id": course_id},
        )


class EnrollmentNotFoundError(EnrollmentSystemError):
    error_code = ErrorCode.ENROLLMENT_NOT_FOUND

    def __init__(self, student_id: str, course_id: str) -> None:
        super().__init__(
            f"Student {student_id} is not enrolled in {course_id}.",
            context={"student_id": student_id, "course_id": course_id},
        )


class InvalidInputError(EnrollmentSystemError):
    error_code = ErrorCode.INVALID_INPUT


class IOFailureError(EnrollmentSystemError):
    """A file could not be fully read or written.

    `partial` holds the lines successfully read before a read failure.
    """

    error_code = ErrorCode.IO_FAILURE

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        partial: list[str] | None = None,
    ) -> None:
        super().__init__(message, context={"path": str(path) if path else None})
        self.path = path
        self.partial = partial or []
