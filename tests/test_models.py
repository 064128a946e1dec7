from __future__ import annotations

import pytest
from pydantic import ValidationError

from core.domain.models import Course, Enrollment, Student
from core.domain.registry import EnrollmentRegistry
from core.interfaces.entity import Describable


@pytest.mark.parametrize(
    "entity, key",
    [
        (Student(student_id="S1", name="Alice"), "S1"),
        (Course(course_id="CS101", name="Intro", credits=3, capacity=5), "CS101"),
        (Enrollment(student_id="S1", course_id="CS101"), ("S1", "CS101")),
    ],
)
def test_entities_are_describable(entity, key):
    assert isinstance(entity, Describable)
    assert entity.key == key
    assert entity.describe()


def test_student_describe():
    assert Student(student_id="S1", name="Alice").describe() == (
        "Student ID: S1 | Name: Alice | Enrolled: (none)"
    )
    student = Student(student_id="S1", name="Alice", enrolled_courses=["CS101", "MA201"])
    assert student.describe().endswith("Enrolled: CS101, MA201")


def test_student_course_list_has_no_duplicates():
    student = Student(student_id="S1", name="Alice")
    assert student.enroll_in_course("CS101") is True
    assert student.enroll_in_course("CS101") is False
    assert student.enrolled_courses == ["CS101"]
    assert student.drop_course("CS101") is True
    assert student.drop_course("CS101") is False


def test_course_setters_are_validated():
    course = Course(course_id="CS101", name="Intro", credits=3, capacity=5)
    course.capacity = 10
    assert course.capacity == 10
    with pytest.raises(ValidationError):
        course.credits = -1
    assert course.credits == 3


def test_enrollment_is_immutable():
    enrollment = Enrollment(student_id="S1", course_id="CS101")
    with pytest.raises(ValidationError):
        enrollment.course_id = "MA201"


def test_registry_reconcile_uses_first_student_with_id():
    first = Student(student_id="S1", name="First")
    second = Student(student_id="S1", name="Second")
    registry = EnrollmentRegistry(
        students=[first, second],
        enrollments=[
            Enrollment(student_id="S1", course_id="CS101"),
            Enrollment(student_id="S1", course_id="CS101"),
            Enrollment(student_id="NOBODY", course_id="CS101"),
        ],
    )

    assert registry.reconcile_student_courses() == 1
    assert first.enrolled_courses == ["CS101"]
    assert second.enrolled_courses == []
    assert len(registry.enrollments) == 3
