"""Diagnostics and operation outcomes returned to the orchestrator."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    severity: Severity
    summary: str
    detail: str
    error: Exception | None = None

    def __str__(self) -> str:
        return f"{self.severity.value}: {self.summary}: {self.detail}"


class Diagnostics:
    """Ordered collection of diagnostics accumulated during one operation."""

    __slots__ = ("_items",)

    def __init__(self, items: Iterable[Diagnostic] = ()) -> None:
        self._items: list[Diagnostic] = list(items)

    def add_error(self, summary: str, detail: str, error: Exception | None = None) -> None:
        self._items.append(Diagnostic(Severity.ERROR, summary, detail, error))

    def add_warning(self, summary: str, detail: str) -> None:
        self._items.append(Diagnostic(Severity.WARNING, summary, detail))

    def extend(self, other: Iterable[Diagnostic]) -> None:
        self._items.extend(other)

    def has_error(self) -> bool:
        return any(d.severity is Severity.ERROR for d in self._items)

    def errors(self) -> list[Diagnostic]:
        return [d for d in self._items if d.severity is Severity.ERROR]

    def warnings(self) -> list[Diagnostic]:
        return [d for d in self._items if d.severity is Severity.WARNING]

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> Diagnostic:
        return self._items[index]

    def __repr__(self) -> str:
        return f"Diagnostics({self._items!r})"


@dataclass(slots=True)
class Outcome[M]:
    """Result of one adapter operation.

    Attributes:
        state: New state to persist, or None when nothing should be written.
        diagnostics: Everything reported during the operation, in order.
        removed: The orchestrator should drop the entity from tracked state.
        cancelled: The operation was abandoned before completing; the remote
            entity may or may not exist.
    """

    state: M | None = None
    diagnostics: Diagnostics = field(default_factory=Diagnostics)
    removed: bool = False
    cancelled: bool = False

    @property
    def ok(self) -> bool:
        return not self.diagnostics.has_error()
