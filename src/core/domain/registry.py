"""In-memory entity collections.

`EnrollmentRegistry` is the single context object that holds the three ordered
collections for the lifetime of a session. It is created once at startup and
handed to `EnrollmentService`, which is the only code that mutates it.

Lookups are linear scans: the collections are small and loaded wholesale.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from core.domain.models import Course, Enrollment, Student


@dataclass
class EnrollmentRegistry:
    students: list[Student] = field(default_factory=list)
    courses: list[Course] = field(default_factory=list)
    enrollments: list[Enrollment] = field(default_factory=list)

    def find_student(self, student_id: str) -> Student | None:
        for student in self.students:
            if student.student_id == student_id:
                return student
        return None

    def find_course(self, course_id: str) -> Course | None:
        for course in self.courses:
            if course.course_id == course_id:
                return course
        return None

    def enrollment_count(self, course_id: str) -> int:
        return sum(1 for e in self.enrollments if e.course_id == course_id)

    def has_enrollment(self, student_id: str, course_id: str) -> bool:
        return any(
            e.student_id == student_id and e.course_id == course_id for e in self.enrollments
        )

    def enrollments_for_student(self, student_id: str) -> list[Enrollment]:
        return [e for e in self.enrollments if e.student_id == student_id]

    def enrollments_for_course(self, course_id: str) -> list[Enrollment]:
        return [e for e in self.enrollments if e.course_id == course_id]

    def reconcile_student_courses(self) -> int:
        """Re-derive student course lists from the enrollment collection.

        For every enrollment whose student is present, the course id is appended
        to that student's list when missing. Enrollments pointing at absent
        students are left untouched. Returns the number of ids appended.
        """

        by_id: dict[str, Student] = {}
        for student in self.students:
            by_id.setdefault(student.student_id, student)

        added = 0
        for enrollment in self.enrollments:
            student = by_id.get(enrollment.student_id)
            if student is not None and student.enroll_in_course(enrollment.course_id):
                added += 1
        return added
