"""Doctor command for data-file diagnostics."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from adapters.file_store import FileRecordStore
from cli.ui_components import build_audit_table
from core.config import AppSettings, write_user_env_vars
from core.domain.exceptions import IOFailureError
from core.services.enrollment_service import EnrollmentService
from core.services.persistence_gateway import DataPaths, PersistenceGateway

app = typer.Typer(no_args_is_help=True, help="Data-file diagnostics and storage configuration.")

_console = Console()


def _check_file(path: Path) -> tuple[str, str]:
    if not path.exists():
        return "MISSING", "Will be created on first save"
    if not path.is_file():
        return "FAIL", "Not a regular file"
    try:
        lines = FileRecordStore().read_lines(path)
    except IOFailureError as exc:
        return "FAIL", str(exc)
    return "OK", f"{len(lines)} line(s)"


@app.command()
def run(ctx: typer.Context) -> None:
    """Check the record files and report drift between them."""

    settings = ctx.obj if isinstance(ctx.obj, AppSettings) else AppSettings()
    paths = DataPaths.from_settings(settings)

    table = Table(title="Enrollment Console Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    data_dir_status = "OK" if settings.data_dir.is_dir() else "MISSING"
    table.add_row("Data dir", data_dir_status, escape(str(settings.data_dir)))
    for label, path in (
        ("Students file", paths.students),
        ("Courses file", paths.courses),
        ("Enrollments file", paths.enrollments),
    ):
        status, detail = _check_file(path)
        table.add_row(label, status, escape(f"{path} ({detail})"))
    table.add_row("Atomic writes", "ON" if settings.atomic_writes else "OFF", "")

    _console.print(table)

    warnings: list[str] = []
    gateway = PersistenceGateway(
        FileRecordStore(atomic=settings.atomic_writes), paths, warning=warnings.append
    )
    report = EnrollmentService.open(gateway).audit()
    _console.print(build_audit_table(report))

    for message in warnings:
        _console.print(f"[yellow]{escape(message)}[/yellow]")
    if report.is_clean:
        _console.print("[green]No inconsistencies found.[/green]")
    else:
        _console.print(
            "\n[yellow]Note:[/yellow] Inconsistent records are kept as loaded; "
            "delete or drop them explicitly to clean up."
        )


@app.command(name="setup")
def setup() -> None:
    """Interactive storage setup (stores config in the user config .env).

    Lets non-Python users point the application at a data directory without
    editing any file by hand.
    """

    data_dir = typer.prompt("Data directory", default=str(Path.cwd()), show_default=True).strip()
    atomic = typer.confirm("Use atomic writes (temp file + rename)?", default=True)

    if not data_dir:
        raise typer.BadParameter("data directory is required")

    env_path = write_user_env_vars(
        {
            "ENROLLMENT_DATA_DIR": str(Path(data_dir).expanduser()),
            "ENROLLMENT_ATOMIC_WRITES": "true" if atomic else "false",
        }
    )

    _console.print(f"[green]Saved storage config to:[/green] {escape(str(env_path))}")
