"""CLI UI components (Rich).

Why separate components:
- Keeps command logic apart from visual details.
- The same tables serve the interactive menu and the one-shot commands.
"""

from __future__ import annotations

from typing import Iterable

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import Enrollment, Student
from core.interfaces.entity import Describable
from core.services.enrollment_service import ConsistencyReport, CourseSummary, OperationResult


def print_banner(console: Console) -> None:
    """Print the welcome banner (disabled with `--no-banner`)."""

    title = Text("ONLINE ENROLLMENT SYSTEM", style="bold cyan")
    subtitle = Text("Students • Courses • Enrollments", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_students_table(students: Iterable[Student]) -> Table:
    table = Table(title="Students")
    table.add_column("Student ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="white")
    table.add_column("Enrolled", style="green")
    for student in students:
        courses = ", ".join(student.enrolled_courses) if student.enrolled_courses else "(none)"
        table.add_row(student.student_id, student.name, courses)
    return table


def build_courses_table(summaries: Iterable[CourseSummary]) -> Table:
    table = Table(title="Courses")
    table.add_column("Course ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="white")
    table.add_column("Credits", justify="right")
    table.add_column("Capacity", justify="right")
    table.add_column("Enrolled", justify="right", style="green")
    for summary in summaries:
        course = summary.course
        enrolled_style = "red" if summary.enrolled >= course.capacity else "green"
        table.add_row(
            course.course_id,
            course.name,
            str(course.credits),
            str(course.capacity),
            Text(str(summary.enrolled), style=enrolled_style),
        )
    return table


def build_enrollments_table(enrollments: Iterable[Enrollment]) -> Table:
    table = Table(title="Enrollments")
    table.add_column("Student ID", style="cyan", no_wrap=True)
    table.add_column("Course ID", style="magenta", no_wrap=True)
    for enrollment in enrollments:
        table.add_row(enrollment.student_id, enrollment.course_id)
    return table


def build_audit_table(report: ConsistencyReport) -> Table:
    """Rows for every kind of drift found by `EnrollmentService.audit`."""

    table = Table(title="Consistency")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    def _describe(items: Iterable[Describable]) -> list[str]:
        return [item.describe() for item in items]

    def _row(label: str, items: list[str]) -> None:
        if items:
            table.add_row(label, "WARN", ", ".join(items))
        else:
            table.add_row(label, "OK", "")

    _row("Enrollments with unknown student", _describe(report.unknown_student_enrollments))
    _row("Enrollments with unknown course", _describe(report.unknown_course_enrollments))
    _row("Duplicate enrollments", _describe(report.duplicate_enrollments))
    _row(
        "Courses over capacity",
        [f"{s.course.course_id} ({s.enrolled}/{s.course.capacity})" for s in report.over_capacity],
    )
    _row(
        "Student courses without enrollment",
        [f"{sid}:{cid}" for sid, cid in report.stale_student_courses],
    )
    _row("Duplicate student IDs", report.duplicate_student_ids)
    _row("Duplicate course IDs", report.duplicate_course_ids)
    return table


def print_result(console: Console, result: OperationResult) -> None:
    """Confirm a fully saved operation.

    Save failures are already printed by the service warning hook, one line
    per file, so nothing is added for them here.
    """

    if result.persisted:
        console.print(f"[green]{result.message} and saved.[/green]")
