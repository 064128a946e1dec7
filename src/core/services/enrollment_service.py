"""Enrollment orchestration: the consistency-preserving CRUD layer.

Every mutating operation here keeps the three collections of the
`EnrollmentRegistry` mutually consistent (cascading deletes, course lists kept
in sync with enrollments, capacity checked at enroll time) and then
immediately rewrites each file it touched.

Save failures do not undo the in-memory change. They are reported on the
returned `OperationResult` and through the warning hook, so memory can be
ahead of disk until the next successful save.

The service is single-threaded. A front end serving several clients would
need a lock around each public method plus file-level locking.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable

from pydantic import ValidationError

from core.codec import FIELD_DELIMITER, LIST_DELIMITER, clean_text
from core.domain.exceptions import (
    AlreadyEnrolledError,
    CourseFullError,
    DuplicateKeyError,
    EnrollmentNotFoundError,
    InvalidInputError,
    IOFailureError,
    NotFoundError,
)
from core.domain.models import Course, Enrollment, Student
from core.domain.registry import EnrollmentRegistry
from core.services.persistence_gateway import PersistenceGateway

logger = logging.getLogger(__name__)

# Characters that would split an id across fields or course-list entries.
_RESERVED_ID_CHARS = (FIELD_DELIMITER, LIST_DELIMITER, "\r", "\n")


class EntityKind(str, Enum):
    STUDENTS = "students"
    COURSES = "courses"
    ENROLLMENTS = "enrollments"


@dataclass
class ServiceHooks:
    """Optional callbacks for UI layers."""

    warning: Callable[[str], None] | None = None


@dataclass
class OperationResult:
    """Outcome of a mutating operation."""

    message: str
    saved: list[EntityKind] = field(default_factory=list)
    save_errors: list[str] = field(default_factory=list)

    @property
    def persisted(self) -> bool:
        return not self.save_errors


@dataclass(frozen=True)
class CourseSummary:
    course: Course
    enrolled: int

    @property
    def seats_left(self) -> int:
        return max(self.course.capacity - self.enrolled, 0)


@dataclass
class ConsistencyReport:
    """Drift between the collections, as found on disk.

    Loading never prunes or repairs these; the report only makes them visible.
    """

    unknown_student_enrollments: list[Enrollment] = field(default_factory=list)
    unknown_course_enrollments: list[Enrollment] = field(default_factory=list)
    duplicate_enrollments: list[Enrollment] = field(default_factory=list)
    over_capacity: list[CourseSummary] = field(default_factory=list)
    stale_student_courses: list[tuple[str, str]] = field(default_factory=list)
    duplicate_student_ids: list[str] = field(default_factory=list)
    duplicate_course_ids: list[str] = field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        return not any(
            (
                self.unknown_student_enrollments,
                self.unknown_course_enrollments,
                self.duplicate_enrollments,
                self.over_capacity,
                self.stale_student_courses,
                self.duplicate_student_ids,
                self.duplicate_course_ids,
            )
        )


class EnrollmentService:
    """Owns the registry for the session and applies every operation to it."""

    def __init__(
        self,
        registry: EnrollmentRegistry,
        gateway: PersistenceGateway,
        hooks: ServiceHooks | None = None,
    ) -> None:
        self._registry = registry
        self._gateway = gateway
        self._hooks = hooks or ServiceHooks()

    @classmethod
    def open(
        cls,
        gateway: PersistenceGateway,
        hooks: ServiceHooks | None = None,
    ) -> "EnrollmentService":
        """Load the three files independently and re-derive student course lists."""

        registry = EnrollmentRegistry(
            students=gateway.load_students(),
            courses=gateway.load_courses(),
            enrollments=gateway.load_enrollments(),
        )
        added = registry.reconcile_student_courses()
        if added:
            logger.info("Restored %d course id(s) to student lists from enrollments", added)
        logger.info(
            "Data loaded: %d students, %d courses, %d enrollments",
            len(registry.students),
            len(registry.courses),
            len(registry.enrollments),
        )
        return cls(registry, gateway, hooks)

    @property
    def registry(self) -> EnrollmentRegistry:
        return self._registry

    # -------------------- persistence --------------------

    def _persist(self, message: str, *kinds: EntityKind) -> OperationResult:
        savers: dict[EntityKind, Callable[[], None]] = {
            EntityKind.STUDENTS: lambda: self._gateway.save_students(self._registry.students),
            EntityKind.COURSES: lambda: self._gateway.save_courses(self._registry.courses),
            EntityKind.ENROLLMENTS: lambda: self._gateway.save_enrollments(
                self._registry.enrollments
            ),
        }
        result = OperationResult(message=message)
        for kind in kinds:
            try:
                savers[kind]()
            except IOFailureError as exc:
                logger.warning("Failed to save %s: %s", kind.value, exc)
                result.save_errors.append(str(exc))
                if self._hooks.warning:
                    self._hooks.warning(f"{message} but failed to save {kind.value}: {exc}")
            else:
                result.saved.append(kind)
        return result

    def save_all(self) -> OperationResult:
        return self._persist(
            "Saved", EntityKind.STUDENTS, EntityKind.COURSES, EntityKind.ENROLLMENTS
        )

    # -------------------- lookups --------------------

    def _require_student(self, student_id: str) -> Student:
        student_id = student_id.strip()
        student = self._registry.find_student(student_id)
        if student is None:
            raise NotFoundError("student", student_id)
        return student

    def _require_course(self, course_id: str) -> Course:
        course_id = course_id.strip()
        course = self._registry.find_course(course_id)
        if course is None:
            raise NotFoundError("course", course_id)
        return course

    @staticmethod
    def _clean_id(value: str, label: str) -> str:
        """Trim a new identifier and reject what a record line cannot hold."""

        value = value.strip()
        if not value:
            raise InvalidInputError(f"{label} must not be empty.", context={"field": label})
        reserved = [char for char in _RESERVED_ID_CHARS if char in value]
        if reserved:
            raise InvalidInputError(
                f"{label} must not contain {', '.join(repr(c) for c in reserved)}.",
                context={"field": label, "value": value},
            )
        return value

    @staticmethod
    def _clean_name(value: str) -> str:
        # Stored exactly as a reload would decode it.
        return clean_text(value).strip()

    @staticmethod
    def _require_non_negative(value: int, label: str) -> None:
        if value < 0:
            raise InvalidInputError(
                f"{label} must be a non-negative integer (got {value}).",
                context={"field": label, "value": value},
            )

    def list_students(self) -> list[Student]:
        return list(self._registry.students)

    def list_courses(self) -> list[Course]:
        return list(self._registry.courses)

    def list_enrollments(self) -> list[Enrollment]:
        return list(self._registry.enrollments)

    def list_courses_with_counts(self) -> list[CourseSummary]:
        return [
            CourseSummary(course=course, enrolled=self._registry.enrollment_count(course.course_id))
            for course in self._registry.courses
        ]

    # -------------------- students --------------------

    def add_student(self, student_id: str, name: str) -> OperationResult:
        student_id = self._clean_id(student_id, "Student ID")
        if self._registry.find_student(student_id) is not None:
            raise DuplicateKeyError("student", student_id)

        self._registry.students.append(
            Student(student_id=student_id, name=self._clean_name(name))
        )
        logger.info("Added student %s", student_id)
        return self._persist("Student added", EntityKind.STUDENTS)

    def rename_student(self, student_id: str, name: str) -> OperationResult:
        student = self._require_student(student_id)
        student.name = self._clean_name(name)
        logger.info("Renamed student %s", student.student_id)
        return self._persist("Student renamed", EntityKind.STUDENTS)

    def delete_student(self, student_id: str) -> OperationResult:
        student = self._require_student(student_id)
        student_id = student.student_id

        self._registry.students[:] = [s for s in self._registry.students if s is not student]
        before = len(self._registry.enrollments)
        self._registry.enrollments[:] = [
            e for e in self._registry.enrollments if e.student_id != student_id
        ]
        removed = before - len(self._registry.enrollments)
        logger.info("Deleted student %s and %d enrollment(s)", student_id, removed)
        return self._persist(
            "Student and related enrollments deleted",
            EntityKind.STUDENTS,
            EntityKind.ENROLLMENTS,
        )

    # -------------------- courses --------------------

    def add_course(self, course_id: str, name: str, credits: int, capacity: int) -> OperationResult:
        course_id = self._clean_id(course_id, "Course ID")
        if self._registry.find_course(course_id) is not None:
            raise DuplicateKeyError("course", course_id)
        self._require_non_negative(credits, "Credits")
        self._require_non_negative(capacity, "Capacity")

        self._registry.courses.append(
            Course(
                course_id=course_id,
                name=self._clean_name(name),
                credits=credits,
                capacity=capacity,
            )
        )
        logger.info("Added course %s (capacity %d)", course_id, capacity)
        return self._persist("Course added", EntityKind.COURSES)

    def update_course(
        self,
        course_id: str,
        *,
        name: str | None = None,
        credits: int | None = None,
        capacity: int | None = None,
    ) -> OperationResult:
        """Apply the course field setters.

        Lowering capacity below the current enrollment count is allowed; the
        limit only applies to future enrollments.
        """

        course = self._require_course(course_id)
        if credits is not None:
            self._require_non_negative(credits, "Credits")
        if capacity is not None:
            self._require_non_negative(capacity, "Capacity")

        try:
            if name is not None:
                course.name = self._clean_name(name)
            if credits is not None:
                course.credits = credits
            if capacity is not None:
                course.capacity = capacity
        except ValidationError as exc:
            raise InvalidInputError(str(exc), context={"course_id": course.course_id}) from exc

        logger.info("Updated course %s", course.course_id)
        return self._persist("Course updated", EntityKind.COURSES)

    def delete_course(self, course_id: str) -> OperationResult:
        course = self._require_course(course_id)
        course_id = course.course_id

        self._registry.courses[:] = [c for c in self._registry.courses if c is not course]
        self._registry.enrollments[:] = [
            e for e in self._registry.enrollments if e.course_id != course_id
        ]
        for student in self._registry.students:
            student.drop_course(course_id)
        logger.info("Deleted course %s", course_id)
        return self._persist(
            "Course and related enrollments deleted",
            EntityKind.COURSES,
            EntityKind.ENROLLMENTS,
            EntityKind.STUDENTS,
        )

    # -------------------- enrollments --------------------

    def enroll(self, student_id: str, course_id: str) -> OperationResult:
        student = self._require_student(student_id)
        course = self._require_course(course_id)
        student_id, course_id = student.student_id, course.course_id

        if self._registry.enrollment_count(course_id) >= course.capacity:
            raise CourseFullError(course_id, course.capacity)
        if self._registry.has_enrollment(student_id, course_id):
            raise AlreadyEnrolledError(student_id, course_id)

        student.enroll_in_course(course_id)
        self._registry.enrollments.append(Enrollment(student_id=student_id, course_id=course_id))
        logger.info("Enrolled %s in %s", student_id, course_id)
        return self._persist("Enrollment successful", EntityKind.STUDENTS, EntityKind.ENROLLMENTS)

    def drop(self, student_id: str, course_id: str) -> OperationResult:
        student = self._require_student(student_id)
        student_id, course_id = student.student_id, course_id.strip()
        if not self._registry.has_enrollment(student_id, course_id):
            raise EnrollmentNotFoundError(student_id, course_id)

        student.drop_course(course_id)
        self._registry.enrollments[:] = [
            e
            for e in self._registry.enrollments
            if not (e.student_id == student_id and e.course_id == course_id)
        ]
        logger.info("Dropped %s from %s", student_id, course_id)
        return self._persist("Dropped", EntityKind.STUDENTS, EntityKind.ENROLLMENTS)

    def export_enrollments(self, output_path: Path | None = None) -> Path:
        """Write the CSV snapshot. Raises `IOFailureError` if it cannot be written."""

        return self._gateway.export_enrollments(self._registry.enrollments, output_path)

    # -------------------- diagnostics --------------------

    def audit(self) -> ConsistencyReport:
        """Detect drift between the collections without changing anything."""

        reg = self._registry
        report = ConsistencyReport()

        student_counts = Counter(s.student_id for s in reg.students)
        course_counts = Counter(c.course_id for c in reg.courses)
        report.duplicate_student_ids = sorted(k for k, n in student_counts.items() if n > 1)
        report.duplicate_course_ids = sorted(k for k, n in course_counts.items() if n > 1)

        seen: set[tuple[str, str]] = set()
        for enrollment in reg.enrollments:
            if enrollment.student_id not in student_counts:
                report.unknown_student_enrollments.append(enrollment)
            if enrollment.course_id not in course_counts:
                report.unknown_course_enrollments.append(enrollment)
            if enrollment.key in seen:
                report.duplicate_enrollments.append(enrollment)
            seen.add(enrollment.key)

        report.over_capacity = [
            summary
            for summary in self.list_courses_with_counts()
            if summary.enrolled > summary.course.capacity
        ]

        for student in reg.students:
            for course_id in student.enrolled_courses:
                if (student.student_id, course_id) not in seen:
                    report.stale_student_courses.append((student.student_id, course_id))

        return report
