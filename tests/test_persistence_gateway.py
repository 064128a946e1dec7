from __future__ import annotations

from pathlib import Path
from typing import Sequence

import pytest

from conftest import write_file
from core.codec import STUDENT_CODEC
from core.domain.exceptions import IOFailureError
from core.domain.models import Course, Enrollment, Student
from core.services.persistence_gateway import DataPaths, PersistenceGateway


class PartialReadStore:
    """Store double: every read fails after yielding `partial`."""

    def __init__(self, partial: list[str]) -> None:
        self.partial = partial

    def exists(self, path: Path) -> bool:
        return True

    def read_lines(self, path: Path) -> list[str]:
        raise IOFailureError(f"read error on {path}", path=path, partial=list(self.partial))

    def write_lines(self, path: Path, lines: Sequence[str]) -> None:
        raise AssertionError("not used")


def test_load_missing_file_is_empty(gateway: PersistenceGateway, data_paths: DataPaths):
    assert gateway.load(data_paths.students) == []
    assert gateway.load_students() == []


def test_load_skips_blank_lines_and_trims(gateway: PersistenceGateway, data_paths: DataPaths):
    write_file(data_paths.courses, "  CS101,Intro,3,30  ", "", "   ", "MA201,Calculus,4,20")
    assert gateway.load(data_paths.courses) == ["CS101,Intro,3,30", "MA201,Calculus,4,20"]
    assert [c.course_id for c in gateway.load_courses()] == ["CS101", "MA201"]


def test_load_skips_malformed_enrollments(gateway: PersistenceGateway, data_paths: DataPaths):
    write_file(data_paths.enrollments, "S1,CS101", "garbage", ",CS101", "S2,MA201")
    assert gateway.load_enrollments() == [
        Enrollment(student_id="S1", course_id="CS101"),
        Enrollment(student_id="S2", course_id="MA201"),
    ]


def test_load_failure_returns_partial_and_warns(data_paths: DataPaths):
    warnings: list[str] = []
    gateway = PersistenceGateway(
        PartialReadStore(["S1,Alice,", "S2,Bob,"]), data_paths, warning=warnings.append
    )
    students = gateway.load_students()
    assert [s.student_id for s in students] == ["S1", "S2"]
    assert len(warnings) == 1
    assert "read error" in warnings[0]


def test_load_failure_before_any_line_is_empty(data_paths: DataPaths):
    gateway = PersistenceGateway(PartialReadStore([]), data_paths)
    assert gateway.load_courses() == []


def test_save_overwrites_previous_content(gateway: PersistenceGateway, data_paths: DataPaths):
    write_file(data_paths.students, "OLD,Stale,", "OLD2,Stale,")
    gateway.save_students([Student(student_id="S1", name="Alice", enrolled_courses=["CS101"])])
    assert data_paths.students.read_text(encoding="utf-8") == "S1,Alice,CS101\n"


def test_save_twice_is_byte_identical(gateway: PersistenceGateway, data_paths: DataPaths):
    courses = [
        Course(course_id="CS101", name="Intro, Part 1", credits=3, capacity=30),
        Course(course_id="MA201", name="Calculus", credits=4, capacity=20),
    ]
    gateway.save_courses(courses)
    first = data_paths.courses.read_bytes()
    gateway.save_courses(courses)
    assert data_paths.courses.read_bytes() == first


def test_save_then_load_round_trip(gateway: PersistenceGateway, data_paths: DataPaths):
    students = [
        Student(student_id="S1", name="Alice", enrolled_courses=["CS101", "MA201"]),
        Student(student_id="S2", name="Bob"),
    ]
    gateway.save(data_paths.students, students, STUDENT_CODEC)
    assert gateway.load_students() == students


def test_export_writes_header_and_rows(gateway: PersistenceGateway, data_paths: DataPaths):
    path = gateway.export_enrollments(
        [
            Enrollment(student_id="S1", course_id="CS101"),
            Enrollment(student_id="S2", course_id="CS101"),
        ]
    )
    assert path == data_paths.export
    assert path.read_text(encoding="utf-8") == "student_id,course_id\nS1,CS101\nS2,CS101\n"


def test_export_empty_has_header_only(gateway: PersistenceGateway, tmp_path: Path):
    out = gateway.export_enrollments([], tmp_path / "out" / "snapshot.csv")
    assert out.read_text(encoding="utf-8") == "student_id,course_id\n"


def test_export_failure_raises_io_failure(gateway: PersistenceGateway, tmp_path: Path):
    blocker = tmp_path / "blocker"
    blocker.write_text("x", encoding="utf-8")
    with pytest.raises(IOFailureError):
        gateway.export_enrollments([], blocker / "snapshot.csv")
