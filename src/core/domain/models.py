"""Domain models (Pydantic v2).

Why Pydantic in the domain:
- Validated fields (non-negative credits/capacity) and self-documenting
  `Field` descriptions without coupling the Core to file formats.
- Assignment validation gives the course setters the same guarantees as
  construction.

Note:
- These models describe *what* a record is, not *how* it is stored. The text
  line format lives in `core.codec`.
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class Student(BaseModel):
    """A student and the ordered list of course ids they are enrolled in.

    The course list is redundant with the enrollment collection; the service
    keeps both in sync on every mutation.
    """

    model_config = ConfigDict(validate_assignment=True)

    student_id: str = Field(
        ...,
        description="Unique student identifier.",
    )
    name: str = Field(
        default="",
        description="Display name.",
    )
    enrolled_courses: list[str] = Field(
        default_factory=list,
        description="Course ids in enrollment order, without duplicates.",
    )

    @property
    def key(self) -> str:
        return self.student_id

    def enroll_in_course(self, course_id: str) -> bool:
        """Append `course_id` unless already present. Returns True if appended."""

        if course_id in self.enrolled_courses:
            return False
        self.enrolled_courses.append(course_id)
        return True

    def drop_course(self, course_id: str) -> bool:
        """Remove `course_id` from the list. Returns True if it was present."""

        if course_id not in self.enrolled_courses:
            return False
        self.enrolled_courses.remove(course_id)
        return True

    def describe(self) -> str:
        courses = ", ".join(self.enrolled_courses) if self.enrolled_courses else "(none)"
        return f"Student ID: {self.student_id} | Name: {self.name} | Enrolled: {courses}"


class Course(BaseModel):
    """A course offering with a seat capacity."""

    model_config = ConfigDict(validate_assignment=True)

    course_id: str = Field(
        ...,
        description="Unique course identifier.",
    )
    name: str = Field(
        default="",
        description="Course title. May contain commas.",
    )
    credits: int = Field(
        default=0,
        ge=0,
        description="Credit value of the course.",
    )
    capacity: int = Field(
        default=0,
        ge=0,
        description="Maximum number of concurrent enrollments.",
    )

    @property
    def key(self) -> str:
        return self.course_id

    def describe(self) -> str:
        return (
            f"Course ID: {self.course_id} | {self.name} | "
            f"Credits: {self.credits} | Capacity: {self.capacity}"
        )


class Enrollment(BaseModel):
    """Join record: the student occupies one seat in the course."""

    model_config = ConfigDict(frozen=True)

    student_id: str
    course_id: str

    @property
    def key(self) -> tuple[str, str]:
        return (self.student_id, self.course_id)

    def describe(self) -> str:
        return f"Student: {self.student_id} | Course: {self.course_id}"
