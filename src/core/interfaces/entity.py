"""Shared entity capability.

Students, courses and enrollments have no common base class; anything that
renders them (tables, listings) only needs an identifier and a description.
"""

from __future__ import annotations

from typing import Hashable, Protocol, runtime_checkable


@runtime_checkable
class Describable(Protocol):
    @property
    def key(self) -> Hashable:
        ...

    def describe(self) -> str:
        ...
