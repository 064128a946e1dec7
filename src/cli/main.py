"""CLI entry point (Typer).

Without a command the interactive menu starts; every menu action also exists
as a one-shot command for scripting. Global options go before the command:

    enrollment-console --data-dir ./data enroll S1 CS101
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, NoReturn, Optional

import typer
from rich.console import Console
from rich.markup import escape

from adapters.file_store import FileRecordStore
from cli import doctor
from cli.logging_setup import configure_logging
from cli.menu import MenuSession
from cli.ui_components import (
    build_courses_table,
    build_enrollments_table,
    build_students_table,
    print_banner,
    print_result,
)
from core.config import AppSettings
from core.domain.exceptions import EnrollmentSystemError
from core.services.enrollment_service import EnrollmentService, OperationResult, ServiceHooks
from core.services.persistence_gateway import DataPaths, PersistenceGateway

app = typer.Typer(
    help="Manage students, courses and enrollments stored as text files.",
    add_completion=False,
)
app.add_typer(doctor.app, name="doctor")

_console = Console()


def _warn(message: str) -> None:
    _console.print(f"[yellow]{escape(message)}[/yellow]")


def open_service(settings: AppSettings) -> EnrollmentService:
    """Wire the file store, gateway and service from `settings` and load the data."""

    store = FileRecordStore(atomic=settings.atomic_writes)
    gateway = PersistenceGateway(store, DataPaths.from_settings(settings), warning=_warn)
    return EnrollmentService.open(gateway, hooks=ServiceHooks(warning=_warn))


def _settings(ctx: typer.Context) -> AppSettings:
    settings = ctx.obj
    if not isinstance(settings, AppSettings):
        settings = AppSettings()
        ctx.obj = settings
    return settings


def _fail(exc: EnrollmentSystemError) -> NoReturn:
    _console.print(f"[red]{escape(exc.message)}[/red]")
    raise typer.Exit(code=1)


def _run_mutation(
    ctx: typer.Context, operation: Callable[[EnrollmentService], OperationResult]
) -> None:
    service = open_service(_settings(ctx))
    try:
        result = operation(service)
    except EnrollmentSystemError as exc:
        _fail(exc)
    print_result(_console, result)
    if not result.persisted:
        raise typer.Exit(code=1)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    data_dir: Optional[Path] = typer.Option(
        None, "--data-dir", "-d", help="Directory holding the record files."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level."),
    no_banner: bool = typer.Option(False, "--no-banner", help="Skip the welcome banner."),
) -> None:
    """Start the interactive menu when no command is given."""

    settings = AppSettings()
    if data_dir is not None:
        settings = settings.model_copy(update={"data_dir": data_dir})
    configure_logging("DEBUG" if verbose else settings.log_level)
    ctx.obj = settings

    if ctx.invoked_subcommand is not None:
        return

    if not no_banner:
        print_banner(_console)
    service = open_service(settings)
    registry = service.registry
    _console.print(
        f"Data loaded: {len(registry.students)} students, {len(registry.courses)} courses, "
        f"{len(registry.enrollments)} enrollments."
    )
    MenuSession(service, _console).run()


# -------------------- students --------------------


@app.command("add-student")
def add_student(ctx: typer.Context, student_id: str, name: str) -> None:
    """Add a student with an empty course list."""

    _run_mutation(ctx, lambda s: s.add_student(student_id.strip(), name.strip()))


@app.command("rename-student")
def rename_student(ctx: typer.Context, student_id: str, name: str) -> None:
    """Change a student's name."""

    _run_mutation(ctx, lambda s: s.rename_student(student_id.strip(), name.strip()))


@app.command("delete-student")
def delete_student(ctx: typer.Context, student_id: str) -> None:
    """Delete a student and all of their enrollments."""

    _run_mutation(ctx, lambda s: s.delete_student(student_id.strip()))


@app.command("students")
def list_students(ctx: typer.Context) -> None:
    """List all students."""

    students = open_service(_settings(ctx)).list_students()
    if not students:
        _console.print("No students found.")
        return
    _console.print(build_students_table(students))


# -------------------- courses --------------------


@app.command("add-course")
def add_course(
    ctx: typer.Context,
    course_id: str,
    name: str,
    credits: int,
    capacity: int,
) -> None:
    """Add a course."""

    _run_mutation(ctx, lambda s: s.add_course(course_id.strip(), name.strip(), credits, capacity))


@app.command("update-course")
def update_course(
    ctx: typer.Context,
    course_id: str,
    name: Optional[str] = typer.Option(None, "--name"),
    credits: Optional[int] = typer.Option(None, "--credits"),
    capacity: Optional[int] = typer.Option(None, "--capacity"),
) -> None:
    """Change a course's name, credits or capacity."""

    _run_mutation(
        ctx,
        lambda s: s.update_course(
            course_id.strip(),
            name=name.strip() if name is not None else None,
            credits=credits,
            capacity=capacity,
        ),
    )


@app.command("delete-course")
def delete_course(ctx: typer.Context, course_id: str) -> None:
    """Delete a course, its enrollments and its id from every student."""

    _run_mutation(ctx, lambda s: s.delete_course(course_id.strip()))


@app.command("courses")
def list_courses(ctx: typer.Context) -> None:
    """List all courses with their live enrollment counts."""

    summaries = open_service(_settings(ctx)).list_courses_with_counts()
    if not summaries:
        _console.print("No courses found.")
        return
    _console.print(build_courses_table(summaries))


# -------------------- enrollments --------------------


@app.command("enroll")
def enroll(ctx: typer.Context, student_id: str, course_id: str) -> None:
    """Enroll a student in a course (respects capacity)."""

    _run_mutation(ctx, lambda s: s.enroll(student_id.strip(), course_id.strip()))


@app.command("drop")
def drop(ctx: typer.Context, student_id: str, course_id: str) -> None:
    """Drop a student from a course."""

    _run_mutation(ctx, lambda s: s.drop(student_id.strip(), course_id.strip()))


@app.command("enrollments")
def list_enrollments(ctx: typer.Context) -> None:
    """List all enrollments."""

    enrollments = open_service(_settings(ctx)).list_enrollments()
    if not enrollments:
        _console.print("No enrollments.")
        return
    _console.print(build_enrollments_table(enrollments))


@app.command("export")
def export(
    ctx: typer.Context,
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="CSV path (defaults to the configured export file)."
    ),
) -> None:
    """Export all enrollments to CSV."""

    service = open_service(_settings(ctx))
    try:
        path = service.export_enrollments(output)
    except EnrollmentSystemError as exc:
        _fail(exc)
    _console.print(f"[green]Exported to {escape(str(path.resolve()))}[/green]")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
