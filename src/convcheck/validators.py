"""
Value Validators

Composable strategies checking whether a raw string converts to the shape
described by a TypeDescriptor.

Variants:
- ScalarValidator: one conversion check for one raw type name
- CollectionValidator: comma-split value, one delegate per element
- PassThroughValidator: wrapper shapes with no string form of their own
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable

from convcheck.diagnostics import (
    DEFAULT_SOURCE,
    VALUE_CONVERSION_FAILED,
    DiagnosticsCollector,
)

ConversionCheck = Callable[[str], Any]
"""Capability-supplied callable converting one raw string or raising ValueError."""


class Validator(ABC):
    """Base class for all validators."""

    __slots__ = ()

    @abstractmethod
    def validate(
        self,
        value: str,
        start: int,
        collector: DiagnosticsCollector,
    ) -> None:
        """Validate ``value`` and report failures into ``collector``.

        Args:
            value: Raw string to check.
            start: Absolute offset of ``value`` in the owning document.
            collector: Sink for diagnostics.
        """

    @abstractmethod
    def can_validate(self) -> bool:
        """Whether validating with this tree can produce diagnostics at all."""


class ScalarValidator(Validator):
    """Validator bound to a single raw type name.

    Without a conversion check (capability unavailable, or the capability
    cannot convert this type) validation is a no-op.
    """

    __slots__ = ("type_name", "_check", "_source")

    def __init__(
        self,
        type_name: str,
        check: ConversionCheck | None,
        source: str = DEFAULT_SOURCE,
    ) -> None:
        self.type_name = type_name
        self._check = check
        self._source = source

    def can_validate(self) -> bool:
        return self._check is not None

    def validate(
        self,
        value: str,
        start: int,
        collector: DiagnosticsCollector,
    ) -> None:
        if self._check is None:
            return
        try:
            self._check(value)
        except ValueError as e:
            collector(
                str(e),
                self._source,
                VALUE_CONVERSION_FAILED,
                start,
                start + len(value),
            )

    def __repr__(self) -> str:
        return f"ScalarValidator({self.type_name!r}, can_validate={self.can_validate()})"


class CollectionValidator(Validator):
    """Validator for comma-delimited collection values.

    Literal commas inside an element cannot be escaped. Elements are
    passed to the delegate untrimmed.
    """

    __slots__ = ("delegate", "separator")

    def __init__(self, delegate: Validator, separator: str = ",") -> None:
        self.delegate = delegate
        self.separator = separator

    def can_validate(self) -> bool:
        return _innermost(self).can_validate()

    def validate(
        self,
        value: str,
        start: int,
        collector: DiagnosticsCollector,
    ) -> None:
        _run(self, value, start, collector)

    def __repr__(self) -> str:
        return _chain_repr(self)


class PassThroughValidator(Validator):
    """Validator forwarding unchanged to its delegate (e.g. Optional<T>)."""

    __slots__ = ("delegate",)

    def __init__(self, delegate: Validator) -> None:
        self.delegate = delegate

    def can_validate(self) -> bool:
        return _innermost(self).can_validate()

    def validate(
        self,
        value: str,
        start: int,
        collector: DiagnosticsCollector,
    ) -> None:
        _run(self, value, start, collector)

    def __repr__(self) -> str:
        return _chain_repr(self)


def _innermost(validator: Validator) -> Validator:
    while isinstance(validator, (CollectionValidator, PassThroughValidator)):
        validator = validator.delegate
    return validator


def _chain_repr(validator: Validator) -> str:
    names = []
    while isinstance(validator, (CollectionValidator, PassThroughValidator)):
        names.append(type(validator).__name__)
        validator = validator.delegate
    return "".join(f"{name}(" for name in names) + repr(validator) + ")" * len(names)


def _run(
    validator: Validator,
    value: str,
    start: int,
    collector: DiagnosticsCollector,
) -> None:
    """Drive a wrapper chain with an explicit work stack.

    Elements are visited in value order, so diagnostics come out in
    ascending offset order.
    """
    pending: list[tuple[Validator, str, int]] = [(validator, value, start)]
    while pending:
        current, text, offset = pending.pop()
        if isinstance(current, PassThroughValidator):
            pending.append((current.delegate, text, offset))
        elif isinstance(current, CollectionValidator):
            elements: list[tuple[Validator, str, int]] = []
            slices = text.split(current.separator)
            last = len(slices) - 1
            for index, element in enumerate(slices):
                # A trailing empty slice (value ending with the separator) is skipped
                if index < last or element:
                    elements.append((current.delegate, element, offset))
                offset += len(element) + len(current.separator)
            pending.extend(reversed(elements))
        else:
            current.validate(text, offset, collector)
