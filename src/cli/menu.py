"""Interactive menu loop.

One command at a time: read a choice, prompt for its arguments, call the
service, report the outcome. Domain errors are printed and the loop goes on;
only "Exit and Save" (or end of input) leaves it.
"""

from __future__ import annotations

import logging
from typing import Callable

from rich.console import Console
from rich.markup import escape
from rich.prompt import IntPrompt, Prompt

from cli.ui_components import (
    build_courses_table,
    build_enrollments_table,
    build_students_table,
    print_result,
)
from core.domain.exceptions import EnrollmentSystemError
from core.services.enrollment_service import EnrollmentService

logger = logging.getLogger(__name__)

MENU_ITEMS: tuple[tuple[str, str], ...] = (
    ("1", "Add Student"),
    ("2", "View All Students"),
    ("3", "Delete Student"),
    ("4", "Add Course"),
    ("5", "View All Courses"),
    ("6", "Delete Course"),
    ("7", "Enroll Student in Course"),
    ("8", "View All Enrollments"),
    ("9", "Drop Student from Course"),
    ("10", "Export Enrollments to CSV"),
    ("11", "Exit and Save"),
)

EXIT_CHOICE = "11"


class MenuSession:
    def __init__(self, service: EnrollmentService, console: Console) -> None:
        self._service = service
        self._console = console
        self._actions: dict[str, Callable[[], None]] = {
            "1": self._add_student,
            "2": self._view_students,
            "3": self._delete_student,
            "4": self._add_course,
            "5": self._view_courses,
            "6": self._delete_course,
            "7": self._enroll,
            "8": self._view_enrollments,
            "9": self._drop,
            "10": self._export,
        }

    # -------------------- input --------------------

    def _ask(self, prompt: str) -> str:
        return Prompt.ask(prompt, console=self._console).strip()

    def _ask_int(self, prompt: str) -> int:
        return IntPrompt.ask(prompt, console=self._console)

    # -------------------- loop --------------------

    def print_menu(self) -> None:
        self._console.print("\n[bold]===== ONLINE ENROLLMENT SYSTEM =====[/bold]")
        for key, label in MENU_ITEMS:
            self._console.print(f"{key}. {label}")

    def run(self) -> None:
        while True:
            self.print_menu()
            try:
                choice = self._ask("Enter choice")
                if choice == EXIT_CHOICE:
                    break
                action = self._actions.get(choice)
                if action is None:
                    self._console.print("[red]Invalid choice. Try again.[/red]")
                    continue
                action()
            except EOFError:
                logger.info("End of input, saving and exiting")
                break
            except EnrollmentSystemError as exc:
                self._console.print(f"[red]{escape(exc.message)}[/red]")
        self._exit()

    def _exit(self) -> None:
        result = self._service.save_all()
        if result.persisted:
            self._console.print("[green]Saved. Exiting.[/green]")
        else:
            self._console.print("Exiting.")

    # -------------------- actions --------------------

    def _add_student(self) -> None:
        student_id = self._ask("Enter Student ID")
        name = self._ask("Enter Student Name")
        print_result(self._console, self._service.add_student(student_id, name))

    def _view_students(self) -> None:
        students = self._service.list_students()
        if not students:
            self._console.print("No students found.")
            return
        self._console.print(build_students_table(students))

    def _delete_student(self) -> None:
        student_id = self._ask("Enter Student ID to delete")
        print_result(self._console, self._service.delete_student(student_id))

    def _add_course(self) -> None:
        course_id = self._ask("Enter Course ID")
        name = self._ask("Enter Course Name")
        credits = self._ask_int("Enter Credits (integer)")
        capacity = self._ask_int("Enter Capacity (integer)")
        print_result(self._console, self._service.add_course(course_id, name, credits, capacity))

    def _view_courses(self) -> None:
        summaries = self._service.list_courses_with_counts()
        if not summaries:
            self._console.print("No courses found.")
            return
        self._console.print(build_courses_table(summaries))

    def _delete_course(self) -> None:
        course_id = self._ask("Enter Course ID to delete")
        print_result(self._console, self._service.delete_course(course_id))

    def _enroll(self) -> None:
        student_id = self._ask("Enter Student ID")
        course_id = self._ask("Enter Course ID")
        print_result(self._console, self._service.enroll(student_id, course_id))

    def _view_enrollments(self) -> None:
        enrollments = self._service.list_enrollments()
        if not enrollments:
            self._console.print("No enrollments.")
            return
        self._console.print(build_enrollments_table(enrollments))

    def _drop(self) -> None:
        student_id = self._ask("Enter Student ID")
        course_id = self._ask("Enter Course ID to drop")
        print_result(self._console, self._service.drop(student_id, course_id))

    def _export(self) -> None:
        path = self._service.export_enrollments()
        self._console.print(f"[green]Exported to {escape(str(path.resolve()))}[/green]")
