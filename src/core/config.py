"""Core configuration.

Why here:
- Centralizes environment variables (pydantic-settings) without polluting the CLI.
- The persistence adapters and the CLI read file locations from one place.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

APP_DIR_NAME = "enrollment-console"


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no extra dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / APP_DIR_NAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_DIR_NAME

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / APP_DIR_NAME
    return Path.home() / ".config" / APP_DIR_NAME


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str], *, env_path: Path | None = None) -> Path:
    """Write/update variables in the user's global .env and return its path."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# enrollment-console user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Central application configuration.

    Why pydantic-settings:
    - Typing + validation at the edge (env vars) without leaking into the Core.
    - One configuration contract for the CLI and the adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="ENROLLMENT_",
        extra="ignore",
        case_sensitive=False,
        # Order: project first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    data_dir: Path = Field(
        default=Path("."),
        description="Directory holding the record files.",
    )
    students_file: str = Field(
        default="students.txt",
        min_length=1,
        description="Students file name, relative to data_dir.",
    )
    courses_file: str = Field(
        default="courses.txt",
        min_length=1,
        description="Courses file name, relative to data_dir.",
    )
    enrollments_file: str = Field(
        default="enrollments.txt",
        min_length=1,
        description="Enrollments file name, relative to data_dir.",
    )
    export_file: str = Field(
        default="export_enrollments.csv",
        min_length=1,
        description="CSV snapshot written by the export command, relative to data_dir.",
    )
    atomic_writes: bool = Field(
        default=True,
        description="Write to a temporary file and rename, so a crash cannot truncate a record file.",
    )
    log_level: str = Field(
        default="ERROR",
        min_length=1,
        description="Logging level for the console handler.",
    )

    @property
    def students_path(self) -> Path:
        return self.data_dir / self.students_file

    @property
    def courses_path(self) -> Path:
        return self.data_dir / self.courses_file

    @property
    def enrollments_path(self) -> Path:
        return self.data_dir / self.enrollments_file

    @property
    def export_path(self) -> Path:
        return self.data_dir / self.export_file
