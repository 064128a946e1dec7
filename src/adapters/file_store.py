"""Line-oriented file storage.

Why it lives in adapters:
- Encodings, line endings and temp-file renames are infrastructure details.
- The Core only sees the `RecordStore` contract.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Sequence

from core.domain.exceptions import IOFailureError

logger = logging.getLogger(__name__)


class FileRecordStore:
    """UTF-8 text files, one record per line.

    - Reads tolerate LF and CRLF.
    - Writes always use LF and replace the whole file. With `atomic=True` the
      content goes to a sibling temp file that is renamed over the target, so
      an interrupted write leaves the previous file intact.
    """

    def __init__(self, *, atomic: bool = True) -> None:
        self._atomic = atomic

    def exists(self, path: Path) -> bool:
        return path.is_file()

    def read_lines(self, path: Path) -> list[str]:
        lines: list[str] = []
        try:
            with path.open("r", encoding="utf-8", newline=None) as fh:
                for raw in fh:
                    lines.append(raw.rstrip("\r\n"))
        except (OSError, UnicodeDecodeError) as exc:
            raise IOFailureError(
                f"Failed to read {path}: {exc}", path=path, partial=lines
            ) from exc
        logger.debug("Read %d line(s) from %s", len(lines), path)
        return lines

    def write_lines(self, path: Path, lines: Sequence[str]) -> None:
        payload = "".join(f"{line}\n" for line in lines)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            if self._atomic:
                self._write_atomic(path, payload)
            else:
                with path.open("w", encoding="utf-8", newline="\n") as fh:
                    fh.write(payload)
        except OSError as exc:
            raise IOFailureError(f"Failed to write {path}: {exc}", path=path) from exc
        logger.debug("Wrote %d line(s) to %s", len(lines), path)

    @staticmethod
    def _write_atomic(path: Path, payload: str) -> None:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            # mkstemp creates 0600; keep the mode a plain truncating write would leave.
            if path.exists():
                shutil.copymode(path, tmp_name)
            else:
                os.chmod(tmp_name, 0o666 & ~_current_umask())
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask
