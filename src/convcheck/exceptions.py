"""
convcheck Exception Hierarchy

Custom exceptions for signature parsing, type resolution and conversion.
"""
from __future__ import annotations

from typing import Any, Optional


class ConvCheckError(Exception):
    """Base exception for all convcheck errors.

    All convcheck-specific exceptions inherit from this class,
    allowing callers to catch all convcheck errors with a single
    except clause.

    Attributes:
        message: Human-readable error description.
        context: Optional dict of additional context for debugging.
    """

    def __init__(
        self,
        message: str,
        *,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        """Initialize ConvCheckError.

        Args:
            message: Error message.
            context: Optional context dict.
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __repr__(self) -> str:
        """Detailed representation for debugging."""
        ctx_str = f", context={self.context}" if self.context else ""
        return f"{self.__class__.__name__}({self.message!r}{ctx_str})"


class TypeSignatureError(ConvCheckError):
    """Raised when a type signature cannot be turned into a validator.

    Validation of the property carrying the signature is aborted; other
    properties and other cached signatures are unaffected.
    """


class SignatureSyntaxError(TypeSignatureError):
    """Raised when a type signature violates the signature grammar.

    This occurs when:
    - Angle brackets are unbalanced
    - An argument list is empty (``Foo<>``)
    - Characters remain after the top-level type

    Attributes:
        signature: The signature being parsed.
        position: Zero-based index where parsing failed.
        reason: Short description of what was expected.
    """

    def __init__(
        self,
        signature: str,
        position: int,
        reason: str,
        *,
        message: Optional[str] = None,
    ) -> None:
        """Initialize SignatureSyntaxError.

        Args:
            signature: Signature text.
            position: Failure position.
            reason: What was expected at the position.
            message: Optional custom message.
        """
        self.signature = signature
        self.position = position
        self.reason = reason

        if message is None:
            message = f"{reason} at position {position} in: {signature}"

        super().__init__(
            message,
            context={
                "signature": signature,
                "position": position,
                "reason": reason,
            },
        )


class UnresolvableTypeError(TypeSignatureError):
    """Raised when a raw type name is unknown to the conversion capability.

    Attributes:
        type_name: The name that could not be resolved.
    """

    def __init__(
        self,
        type_name: str,
        *,
        message: Optional[str] = None,
    ) -> None:
        """Initialize UnresolvableTypeError.

        Args:
            type_name: Unresolved type name.
            message: Optional custom message.
        """
        self.type_name = type_name

        if message is None:
            message = f"Unknown type: {type_name}"

        super().__init__(message, context={"type_name": type_name})


class ConversionError(ConvCheckError, ValueError):
    """Raised by a capability when a raw string does not convert.

    This is the expected per-value failure; validators turn it into a
    diagnostic instead of propagating it.

    Attributes:
        type_name: Target type name.
        value: The raw string that failed to convert.
    """

    def __init__(
        self,
        type_name: str,
        value: str,
        message: str,
    ) -> None:
        """Initialize ConversionError.

        Args:
            type_name: Target type name.
            value: Raw value.
            message: Message reported to the user.
        """
        self.type_name = type_name
        self.value = value

        super().__init__(
            message,
            context={"type_name": type_name, "value": value},
        )


class ConfigurationError(ConvCheckError):
    """Raised when convcheck configuration is invalid."""

    def __init__(
        self,
        message: str,
        *,
        config_key: Optional[str] = None,
        expected: Optional[Any] = None,
        got: Optional[Any] = None,
    ) -> None:
        """Initialize ConfigurationError.

        Args:
            message: Error message.
            config_key: The configuration key with the error.
            expected: Expected value or type.
            got: Actual value received.
        """
        self.config_key = config_key
        self.expected = expected
        self.got = got

        super().__init__(
            message,
            context={
                "config_key": config_key,
                "expected": expected,
                "got": got,
            },
        )
