"""CSV export of the enrollment collection.

Why CSV:
- Interoperability with spreadsheets and other tools.
- A read-only projection: the application never reads this file back.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable

from core.domain.models import Enrollment

EXPORT_HEADER = ("student_id", "course_id")


def export_enrollments_csv(*, enrollments: Iterable[Enrollment], output_path: Path) -> Path:
    """Write a UTF-8 CSV snapshot (fixed header + one row per enrollment)."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8", newline="") as fh:
        writer = csv.writer(fh, lineterminator="\n")
        writer.writerow(EXPORT_HEADER)
        for enrollment in enrollments:
            writer.writerow((enrollment.student_id, enrollment.course_id))
    return output_path
