"""Shared fixtures: data files under tmp_path, a real gateway and a loaded service."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import pytest

from adapters.file_store import FileRecordStore
from core.domain.exceptions import IOFailureError
from core.services.enrollment_service import EnrollmentService, ServiceHooks
from core.services.persistence_gateway import DataPaths, PersistenceGateway


class FlakyStore(FileRecordStore):
    """File store whose writes to the paths in `failing` raise `IOFailureError`."""

    def __init__(self) -> None:
        super().__init__(atomic=True)
        self.failing: set[Path] = set()

    def write_lines(self, path: Path, lines: Sequence[str]) -> None:
        if path in self.failing:
            raise IOFailureError(f"disk full: {path}", path=path)
        super().write_lines(path, lines)


def write_file(path: Path, *lines: str) -> Path:
    path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
    return path


@pytest.fixture
def data_paths(tmp_path: Path) -> DataPaths:
    return DataPaths(
        students=tmp_path / "students.txt",
        courses=tmp_path / "courses.txt",
        enrollments=tmp_path / "enrollments.txt",
        export=tmp_path / "export_enrollments.csv",
    )


@pytest.fixture
def warnings() -> list[str]:
    return []


@pytest.fixture
def gateway(data_paths: DataPaths, warnings: list[str]) -> PersistenceGateway:
    return PersistenceGateway(FileRecordStore(), data_paths, warning=warnings.append)


@pytest.fixture
def service(gateway: PersistenceGateway, warnings: list[str]) -> EnrollmentService:
    return EnrollmentService.open(gateway, hooks=ServiceHooks(warning=warnings.append))


@pytest.fixture
def flaky_store() -> FlakyStore:
    return FlakyStore()


@pytest.fixture
def flaky_service(
    flaky_store: FlakyStore, data_paths: DataPaths, warnings: list[str]
) -> EnrollmentService:
    gateway = PersistenceGateway(flaky_store, data_paths, warning=warnings.append)
    return EnrollmentService.open(gateway, hooks=ServiceHooks(warning=warnings.append))
