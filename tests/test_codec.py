from __future__ import annotations

import pytest

from core.codec import (
    COURSE_CODEC,
    ENROLLMENT_CODEC,
    STUDENT_CODEC,
    clean_text,
    decode_course,
    decode_enrollment,
    decode_student,
    encode_course,
    encode_enrollment,
    encode_student,
    parse_int,
)
from core.domain.models import Course, Enrollment, Student


class TestStudentCodec:
    def test_encode_joins_courses_with_pipe(self):
        student = Student(student_id="S1", name="Alice", enrolled_courses=["CS101", "MA201"])
        assert encode_student(student) == "S1,Alice,CS101|MA201"

    def test_encode_keeps_empty_course_segment(self):
        assert encode_student(Student(student_id="S1", name="Alice")) == "S1,Alice,"

    def test_encode_replaces_line_breaks(self):
        student = Student(student_id="S1", name="Al\nice\rB")
        assert encode_student(student) == "S1,Al ice B,"

    def test_decode_full_line(self):
        student = decode_student("S1,Alice,CS101|MA201")
        assert student.student_id == "S1"
        assert student.name == "Alice"
        assert student.enrolled_courses == ["CS101", "MA201"]

    def test_decode_without_course_segment(self):
        student = decode_student("S1,Alice")
        assert student.name == "Alice"
        assert student.enrolled_courses == []

    def test_decode_id_only_defaults_to_empty(self):
        student = decode_student("S1")
        assert student.student_id == "S1"
        assert student.name == ""
        assert student.enrolled_courses == []

    def test_decode_trims_and_ignores_empty_course_ids(self):
        student = decode_student(" S1 , Alice , CS101 || MA201 |")
        assert student.student_id == "S1"
        assert student.name == "Alice"
        assert student.enrolled_courses == ["CS101", "MA201"]

    def test_decode_drops_duplicate_course_ids(self):
        assert decode_student("S1,Alice,CS101|CS101").enrolled_courses == ["CS101"]

    def test_name_with_comma_survives(self):
        student = Student(student_id="S1", name="Smith, John", enrolled_courses=["CS101"])
        assert decode_student(encode_student(student)) == student


class TestCourseCodec:
    def test_encode(self):
        course = Course(course_id="CS101", name="Intro", credits=3, capacity=30)
        assert encode_course(course) == "CS101,Intro,3,30"

    def test_decode_name_containing_comma(self):
        course = decode_course("C1,Data, Structures,4,30")
        assert course.course_id == "C1"
        assert course.name == "Data, Structures"
        assert course.credits == 4
        assert course.capacity == 30

    def test_decode_missing_trailing_fields(self):
        course = decode_course("C1,Name")
        assert (course.name, course.credits, course.capacity) == ("Name", 0, 0)

        course = decode_course("C1,Name,3")
        assert (course.credits, course.capacity) == (3, 0)

    def test_decode_non_integer_numbers_default_to_zero(self):
        course = decode_course("C1,Name,abc,25")
        assert course.credits == 0
        assert course.capacity == 25

    def test_decode_negative_numbers_default_to_zero(self):
        course = decode_course("C1,Name,-2,5")
        assert course.credits == 0
        assert course.capacity == 5

    def test_decode_empty_line_fields(self):
        course = decode_course("")
        assert course.course_id == ""
        assert course.name == ""

    def test_name_line_breaks_become_spaces(self):
        course = Course(course_id="C1", name="Data,\nStructures", credits=4, capacity=30)
        decoded = decode_course(encode_course(course))
        assert decoded.name == "Data, Structures"
        assert decoded.credits == 4
        assert decoded.capacity == 30


class TestEnrollmentCodec:
    def test_encode(self):
        assert encode_enrollment(Enrollment(student_id="S1", course_id="CS101")) == "S1,CS101"

    def test_decode_trims(self):
        assert decode_enrollment(" S1 , CS101 ") == Enrollment(student_id="S1", course_id="CS101")

    @pytest.mark.parametrize("line", ["S1", "S1,", ",CS101", ""])
    def test_decode_without_both_keys_is_skipped(self, line):
        assert decode_enrollment(line) is None


@pytest.mark.parametrize(
    "codec, entity",
    [
        (STUDENT_CODEC, Student(student_id="S9", name="Zoë Ørsted", enrolled_courses=["A", "B"])),
        (COURSE_CODEC, Course(course_id="PHY1", name="Physics, Part I", credits=5, capacity=0)),
        (ENROLLMENT_CODEC, Enrollment(student_id="S9", course_id="PHY1")),
    ],
)
def test_round_trip(codec, entity):
    assert codec.decode(codec.encode(entity)) == entity


@pytest.mark.parametrize(
    "value, expected",
    [("42", 42), (" 7 ", 7), ("+3", 3), ("", 0), ("x1", 0), ("1.5", 0), ("-4", 0), ("1_000", 0)],
)
def test_parse_int(value, expected):
    assert parse_int(value) == expected


def test_clean_text():
    assert clean_text("a\r\nb") == "a  b"
