"""Record codec: one entity <-> one delimited text line.

Line formats:
- students:    ``studentId,name,course1|course2|...``
- courses:     ``courseId,courseName,credits,capacity``
- enrollments: ``studentId,courseId``

Decoding rules:
- The split is bounded by the entity's field count. The identifier is taken
  from the left and trailing fields from the right, so a free-text name that
  contains commas stays in one piece.
- Missing trailing fields default to ``""`` / ``0``; non-integer numbers become ``0``.
- A student or course line never fails. An enrollment line without both keys
  decodes to ``None`` and is skipped by the caller.

Encoding replaces embedded CR/LF in free-text fields with a space (lossy).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

from core.domain.models import Course, Enrollment, Student

FIELD_DELIMITER = ","
LIST_DELIMITER = "|"

_INT_RE = re.compile(r"\+?\d+")

T = TypeVar("T")


def clean_text(value: str) -> str:
    """Replace CR/LF so the value cannot break the one-record-per-line format."""

    return value.replace("\r", " ").replace("\n", " ")


def parse_int(value: str, default: int = 0) -> int:
    """Parse a base-10 non-negative integer, returning `default` on anything else."""

    text = value.strip()
    if not _INT_RE.fullmatch(text):
        return default
    return int(text)


def _split_key(line: str) -> tuple[str, str | None]:
    head, sep, rest = line.partition(FIELD_DELIMITER)
    return head.strip(), (rest if sep else None)


# -------------------- Student --------------------

def encode_student(student: Student) -> str:
    courses = LIST_DELIMITER.join(student.enrolled_courses)
    return FIELD_DELIMITER.join(
        (student.student_id, clean_text(student.name), clean_text(courses))
    )


def decode_student(line: str) -> Student:
    student_id, rest = _split_key(line)
    name = ""
    courses: list[str] = []
    if rest is not None:
        parts = rest.rsplit(FIELD_DELIMITER, 1)
        name = parts[0].strip()
        if len(parts) > 1:
            for course_id in parts[1].split(LIST_DELIMITER):
                course_id = course_id.strip()
                if course_id and course_id not in courses:
                    courses.append(course_id)
    return Student(student_id=student_id, name=name, enrolled_courses=courses)


# -------------------- Course --------------------

def encode_course(course: Course) -> str:
    return FIELD_DELIMITER.join(
        (course.course_id, clean_text(course.name), str(course.credits), str(course.capacity))
    )


def decode_course(line: str) -> Course:
    course_id, rest = _split_key(line)
    name = ""
    credits = 0
    capacity = 0
    if rest is not None:
        parts = rest.rsplit(FIELD_DELIMITER, 2)
        name = parts[0].strip()
        if len(parts) > 1:
            credits = parse_int(parts[1])
        if len(parts) > 2:
            capacity = parse_int(parts[2])
    return Course(course_id=course_id, name=name, credits=credits, capacity=capacity)


# -------------------- Enrollment --------------------

def encode_enrollment(enrollment: Enrollment) -> str:
    return FIELD_DELIMITER.join((enrollment.student_id, enrollment.course_id))


def decode_enrollment(line: str) -> Enrollment | None:
    student_id, rest = _split_key(line)
    if rest is None:
        return None
    course_id = rest.strip()
    if not student_id or not course_id:
        return None
    return Enrollment(student_id=student_id, course_id=course_id)


@dataclass(frozen=True)
class RecordCodec(Generic[T]):
    """Pairs an entity's encoder and decoder for the persistence gateway."""

    entity: str
    encode: Callable[[T], str]
    decode: Callable[[str], T | None]


STUDENT_CODEC: RecordCodec[Student] = RecordCodec("students", encode_student, decode_student)
COURSE_CODEC: RecordCodec[Course] = RecordCodec("courses", encode_course, decode_course)
ENROLLMENT_CODEC: RecordCodec[Enrollment] = RecordCodec(
    "enrollments", encode_enrollment, decode_enrollment
)
