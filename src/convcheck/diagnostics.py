"""
convcheck Diagnostics

Diagnostic records, diagnostic codes and the collector interface that
validators report into.

This module provides:
- DiagnosticsCollector: Protocol for sinks receiving diagnostics
- Diagnostic: Frozen dataclass for one reported problem
- DiagnosticList: Collector storing Diagnostic objects in order
- Diagnostic code constants and ALL_DIAGNOSTIC_CODES
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Iterator, Protocol, runtime_checkable

DEFAULT_SOURCE = "convcheck"
"""Source identifier attached to diagnostics unless configured otherwise."""


# =============================================================================
# Diagnostic Codes
# =============================================================================

VALUE_CONVERSION_FAILED = "VALUE_CONVERSION_FAILED"
"""Value (or collection element) is not convertible to the declared type."""

ALL_DIAGNOSTIC_CODES: frozenset[str] = frozenset({
    VALUE_CONVERSION_FAILED,
})


@runtime_checkable
class DiagnosticsCollector(Protocol):
    """Sink receiving validation failures.

    Any callable with this signature can be used, including a lambda.
    Offsets are absolute positions within the owning document.
    """

    def __call__(
        self,
        message: str,
        source: str,
        code: str,
        start: int,
        end: int,
    ) -> None:
        ...


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """One validation failure.

    Attributes:
        message: Message supplied by the conversion capability.
        source: Diagnostic source identifier.
        code: Diagnostic code (see ALL_DIAGNOSTIC_CODES).
        start: Absolute start offset (inclusive).
        end: Absolute end offset (exclusive).
    """

    message: str
    source: str
    code: str
    start: int
    end: int

    def __str__(self) -> str:
        """Return formatted string representation."""
        return f"[{self.code}] {self.start}-{self.end}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON compatibility."""
        return {
            "message": self.message,
            "source": self.source,
            "code": self.code,
            "start": self.start,
            "end": self.end,
        }

    def to_json(self) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Diagnostic:
        """Deserialize from dictionary."""
        return cls(
            message=d["message"],
            source=d["source"],
            code=d["code"],
            start=d["start"],
            end=d["end"],
        )


class DiagnosticList:
    """Collector that keeps every reported diagnostic in arrival order."""

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: list[Diagnostic] = []

    def __call__(
        self,
        message: str,
        source: str,
        code: str,
        start: int,
        end: int,
    ) -> None:
        self._items.append(Diagnostic(message, source, code, start, end))

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> Diagnostic:
        return self._items[index]

    @property
    def messages(self) -> list[str]:
        """Messages of all collected diagnostics."""
        return [d.message for d in self._items]

    @property
    def spans(self) -> list[tuple[int, int]]:
        """(start, end) offsets of all collected diagnostics."""
        return [(d.start, d.end) for d in self._items]

    def clear(self) -> None:
        self._items.clear()
