"""Diagnostics returned alongside every lifecycle result."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    """A single error or warning reported to the host."""

    severity: Severity
    summary: str
    detail: str = ""

    def __str__(self) -> str:
        return f"{self.severity.value}: {self.summary}: {self.detail}"


class Diagnostics:
    """An ordered collection of diagnostics.

    Errors stop further side effects in the operation that records them;
    warnings are informational and never stop execution.
    """

    def __init__(self, items: Iterable[Diagnostic] = ()) -> None:
        self._items: list[Diagnostic] = list(items)

    def add_error(self, summary: str, detail: str = "") -> None:
        logger.debug("Diagnostic error: %s: %s", summary, detail)
        self._items.append(Diagnostic(Severity.ERROR, summary, detail))

    def add_warning(self, summary: str, detail: str = "") -> None:
        logger.warning("%s: %s", summary, detail)
        self._items.append(Diagnostic(Severity.WARNING, summary, detail))

    def extend(self, other: Iterable[Diagnostic]) -> None:
        self._items.extend(other)

    def has_error(self) -> bool:
        return any(d.severity is Severity.ERROR for d in self._items)

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self._items if d.severity is Severity.ERROR]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self._items if d.severity is Severity.WARNING]

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"Diagnostics(errors={len(self.errors)}, warnings={len(self.warnings)})"


@dataclass
class Result(Generic[T]):
    """The value of a lifecycle call paired with its diagnostics."""

    value: T
    diagnostics: Diagnostics = field(default_factory=Diagnostics)

    @property
    def ok(self) -> bool:
        return not self.diagnostics.has_error()
