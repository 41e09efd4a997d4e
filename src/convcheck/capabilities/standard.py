"""
Standard Conversion Capability

Built-in provider converting the standard Java scalar types (primitives,
their boxed forms, String, big numbers, UUID, Duration, URI, ...) the way
the usual MicroProfile Config implementations do:

- values are trimmed before conversion
- an empty value converts to nothing and never fails
- booleans never fail; unknown spellings mean false
"""
from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any, Callable
from urllib.parse import urlsplit

from convcheck.capabilities.base import CapabilityProvider, ConversionCapability
from convcheck.exceptions import ConversionError, UnresolvableTypeError

if TYPE_CHECKING:
    from convcheck.project import ProjectContext
    from convcheck.validators import ConversionCheck

logger = logging.getLogger(__name__)

_QUALIFIED_NAME = re.compile(
    r"[A-Za-z_$][\w$]*(?:\.[A-Za-z_$][\w$]*)*(?:\$[\w$]+)*"
)
_INTEGER = re.compile(r"[+-]?\d+")
_FLOATING = re.compile(
    r"[+-]?(?:NaN|Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?[fFdD]?)"
)
_DECIMAL = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_UUID = re.compile(
    r"[0-9a-fA-F]{1,8}-[0-9a-fA-F]{1,4}-[0-9a-fA-F]{1,4}-"
    r"[0-9a-fA-F]{1,4}-[0-9a-fA-F]{1,12}"
)
_DURATION = re.compile(
    r"[+-]?P(?:[+-]?\d+D)?"
    r"(?:T(?:[+-]?\d+H)?(?:[+-]?\d+M)?(?:[+-]?\d+(?:[.,]\d{0,9})?S)?)?",
    re.IGNORECASE,
)

_TRUE_VALUES = frozenset({"true", "1", "yes", "y", "on"})

# Primitive and boxed spellings share a canonical name.
TYPE_ALIASES: dict[str, str] = {
    "int": "java.lang.Integer",
    "Integer": "java.lang.Integer",
    "long": "java.lang.Long",
    "Long": "java.lang.Long",
    "short": "java.lang.Short",
    "Short": "java.lang.Short",
    "byte": "java.lang.Byte",
    "Byte": "java.lang.Byte",
    "double": "java.lang.Double",
    "Double": "java.lang.Double",
    "float": "java.lang.Float",
    "Float": "java.lang.Float",
    "boolean": "java.lang.Boolean",
    "Boolean": "java.lang.Boolean",
    "char": "java.lang.Character",
    "Character": "java.lang.Character",
    "String": "java.lang.String",
}


def _integer_check(
    type_name: str,
    kind: str,
    bits: int,
) -> Callable[[str], Any]:
    low = -(1 << (bits - 1))
    high = (1 << (bits - 1)) - 1

    def check(value: str) -> int | None:
        text = value.strip()
        if not text:
            return None
        if _INTEGER.fullmatch(text):
            number = int(text)
            if low <= number <= high:
                return number
        raise ConversionError(type_name, value, f'Expected {kind} value, got "{text}"')

    return check


def _float_check(type_name: str, kind: str) -> Callable[[str], Any]:
    def check(value: str) -> float | None:
        text = value.strip()
        if not text:
            return None
        if not _FLOATING.fullmatch(text):
            raise ConversionError(type_name, value, f'Expected {kind} value, got "{text}"')
        return float(text.rstrip("fFdD").replace("Infinity", "inf"))

    return check


def _boolean(value: str) -> bool | None:
    text = value.strip()
    if not text:
        return None
    return text.lower() in _TRUE_VALUES


def _character(value: str) -> str | None:
    text = value.strip()
    if not text:
        return None
    if len(text) != 1:
        raise ConversionError(
            "java.lang.Character", value, f'Expected a single character, got "{text}"'
        )
    return text


def _string(value: str) -> str | None:
    return value or None


def _big_integer(value: str) -> int | None:
    text = value.strip()
    if not text:
        return None
    if not _INTEGER.fullmatch(text):
        raise ConversionError(
            "java.math.BigInteger", value, f'Expected an integer value, got "{text}"'
        )
    return int(text)


def _big_decimal(value: str) -> str | None:
    text = value.strip()
    if not text:
        return None
    if not _DECIMAL.fullmatch(text):
        raise ConversionError(
            "java.math.BigDecimal", value, f'Expected a decimal value, got "{text}"'
        )
    return text


def _uuid(value: str) -> str | None:
    text = value.strip()
    if not text:
        return None
    if not _UUID.fullmatch(text):
        raise ConversionError("java.util.UUID", value, f'Expected a UUID value, got "{text}"')
    return text.lower()


def _duration(value: str) -> str | None:
    text = value.strip()
    if not text:
        return None
    upper = text.upper()
    # A bare "P" carries no amount; a "T" needs at least one H, M or S field
    if not _DURATION.fullmatch(text) or upper.endswith("T") or upper.lstrip("+-") == "P":
        raise ConversionError(
            "java.time.Duration", value, f'Expected a duration value, got "{text}"'
        )
    return text


def _uri(value: str) -> str | None:
    text = value.strip()
    if not text:
        return None
    if any(char.isspace() for char in text):
        raise ConversionError("java.net.URI", value, f'Expected a URI value, got "{text}"')
    try:
        urlsplit(text)
    except ValueError:
        raise ConversionError(
            "java.net.URI", value, f'Expected a URI value, got "{text}"'
        ) from None
    return text


def _url(value: str) -> str | None:
    text = _uri(value)
    if text is not None and not urlsplit(text).scheme:
        raise ConversionError("java.net.URL", value, f'Expected a URL value, got "{text}"')
    return text


def _path(value: str) -> str | None:
    if "\x00" in value:
        raise ConversionError("java.nio.file.Path", value, "Path contains a NUL character")
    return value.strip() or None


def _pattern(value: str) -> re.Pattern[str] | None:
    if not value:
        return None
    try:
        return re.compile(value)
    except re.error as e:
        raise ConversionError(
            "java.util.regex.Pattern", value, f'Invalid regular expression "{value}": {e}'
        ) from None


STANDARD_CONVERTERS: dict[str, Callable[[str], Any]] = {
    "java.lang.Integer": _integer_check("java.lang.Integer", "an integer", 32),
    "java.lang.Long": _integer_check("java.lang.Long", "a long", 64),
    "java.lang.Short": _integer_check("java.lang.Short", "a short", 16),
    "java.lang.Byte": _integer_check("java.lang.Byte", "a byte", 8),
    "java.lang.Double": _float_check("java.lang.Double", "a double"),
    "java.lang.Float": _float_check("java.lang.Float", "a float"),
    "java.lang.Boolean": _boolean,
    "java.lang.Character": _character,
    "java.lang.String": _string,
    "java.lang.CharSequence": _string,
    "java.math.BigInteger": _big_integer,
    "java.math.BigDecimal": _big_decimal,
    "java.util.UUID": _uuid,
    "java.time.Duration": _duration,
    "java.net.URI": _uri,
    "java.net.URL": _url,
    "java.nio.file.Path": _path,
    "java.util.regex.Pattern": _pattern,
}


class StandardConversionCapability(ConversionCapability):
    """Capability converting the standard Java scalar types.

    Well-formed class names outside the standard set resolve but have no
    converter, so values of those types are not checked.
    """

    capability_id = "standard"

    def __init__(
        self,
        converters: dict[str, Callable[[str], Any]] | None = None,
    ) -> None:
        self._converters = dict(STANDARD_CONVERTERS)
        if converters:
            self._converters.update(converters)

    def resolve_type(self, type_name: str) -> str:
        canonical = TYPE_ALIASES.get(type_name, type_name)
        if canonical in self._converters:
            return canonical
        if not _QUALIFIED_NAME.fullmatch(canonical):
            raise UnresolvableTypeError(type_name)
        return canonical

    def converter_for(self, type_name: str) -> ConversionCheck | None:
        return self._converters.get(TYPE_ALIASES.get(type_name, type_name))

    @property
    def supported_types(self) -> frozenset[str]:
        """Canonical names this capability can convert."""
        return frozenset(self._converters)


class StandardConversionProvider(CapabilityProvider):
    """Provider for StandardConversionCapability; needs nothing from the project."""

    provider_id = "standard"

    def build(self, project: ProjectContext) -> StandardConversionCapability:
        logger.debug("Building standard conversion capability for %s", project.project_id)
        return StandardConversionCapability()
