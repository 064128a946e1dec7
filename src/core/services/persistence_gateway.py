"""Bulk load/save of the record collections.

The gateway turns files into entity lists and back using the record codec. It
never merges or appends: a save always rewrites the whole file from the
current in-memory collection, and a load always starts from an empty list.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Sequence, TypeVar

from adapters.csv_exporter import export_enrollments_csv
from core.codec import COURSE_CODEC, ENROLLMENT_CODEC, STUDENT_CODEC, RecordCodec
from core.config import AppSettings
from core.domain.exceptions import IOFailureError
from core.domain.models import Course, Enrollment, Student
from core.interfaces.record_store import RecordStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class DataPaths:
    """Locations of the three record files and the export snapshot."""

    students: Path
    courses: Path
    enrollments: Path
    export: Path

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "DataPaths":
        return cls(
            students=settings.students_path,
            courses=settings.courses_path,
            enrollments=settings.enrollments_path,
            export=settings.export_path,
        )


class PersistenceGateway:
    """Reads and writes whole collections through a `RecordStore`.

    Load failures are reported through `warning` (and the log) and degrade to
    whatever was read; save failures raise `IOFailureError`.
    """

    def __init__(
        self,
        store: RecordStore,
        paths: DataPaths,
        *,
        warning: Callable[[str], None] | None = None,
    ) -> None:
        self._store = store
        self.paths = paths
        self._warning = warning

    def _warn(self, message: str) -> None:
        logger.warning(message)
        if self._warning:
            self._warning(message)

    # -------------------- generic --------------------

    def load(self, path: Path) -> list[str]:
        """Return the non-blank, trimmed lines of `path` (``[]`` if absent)."""

        if not self._store.exists(path):
            logger.info("No data file at %s, starting empty", path)
            return []
        try:
            raw_lines = self._store.read_lines(path)
        except IOFailureError as exc:
            self._warn(f"Failed to load {path}: {exc}")
            raw_lines = exc.partial
        return [line.strip() for line in raw_lines if line.strip()]

    def load_records(self, path: Path, codec: RecordCodec[T]) -> list[T]:
        records: list[T] = []
        skipped = 0
        for line in self.load(path):
            record = codec.decode(line)
            if record is None:
                skipped += 1
                continue
            records.append(record)
        if skipped:
            logger.warning("Skipped %d malformed %s line(s) in %s", skipped, codec.entity, path)
        logger.info("Loaded %d %s from %s", len(records), codec.entity, path)
        return records

    def save(self, path: Path, entities: Sequence[T], codec: RecordCodec[T]) -> None:
        """Overwrite `path` with exactly the encoded `entities`."""

        self._store.write_lines(path, [codec.encode(entity) for entity in entities])
        logger.info("Saved %d %s to %s", len(entities), codec.entity, path)

    # -------------------- typed helpers --------------------

    def load_students(self) -> list[Student]:
        return self.load_records(self.paths.students, STUDENT_CODEC)

    def load_courses(self) -> list[Course]:
        return self.load_records(self.paths.courses, COURSE_CODEC)

    def load_enrollments(self) -> list[Enrollment]:
        return self.load_records(self.paths.enrollments, ENROLLMENT_CODEC)

    def save_students(self, students: Sequence[Student]) -> None:
        self.save(self.paths.students, students, STUDENT_CODEC)

    def save_courses(self, courses: Sequence[Course]) -> None:
        self.save(self.paths.courses, courses, COURSE_CODEC)

    def save_enrollments(self, enrollments: Sequence[Enrollment]) -> None:
        self.save(self.paths.enrollments, enrollments, ENROLLMENT_CODEC)

    def export_enrollments(
        self, enrollments: Sequence[Enrollment], output_path: Path | None = None
    ) -> Path:
        target = output_path or self.paths.export
        try:
            export_enrollments_csv(enrollments=enrollments, output_path=target)
        except OSError as exc:
            raise IOFailureError(f"Failed to export to {target}: {exc}", path=target) from exc
        logger.info("Exported %d enrollment(s) to %s", len(enrollments), target)
        return target
