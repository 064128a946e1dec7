"""Record store contract.

Why Protocol:
- A structural contract (duck typing) without rigid inheritance.
- The persistence gateway can run against the real file system or an
  in-memory/failing double in tests without touching the Core.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, Sequence, runtime_checkable


@runtime_checkable
class RecordStore(Protocol):
    """Minimal line-oriented storage for a named file.

    Design rules:
    - `read_lines` returns raw lines without line terminators.
    - `write_lines` replaces the whole file (truncate-then-write).
    - Failures are raised as `core.domain.exceptions.IOFailureError`; a read
      failure carries the lines read so far in `partial`.
    """

    def exists(self, path: Path) -> bool:
        ...

    def read_lines(self, path: Path) -> list[str]:
        ...

    def write_lines(self, path: Path, lines: Sequence[str]) -> None:
        ...
