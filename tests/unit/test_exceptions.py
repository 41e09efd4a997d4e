"""Exception Hierarchy Tests for convcheck."""
from __future__ import annotations

import pytest


class TestExceptionHierarchy:
    """Tests for exception class hierarchy."""

    def test_base_exception_exists(self) -> None:
        """ConvCheckError base class exists."""
        from convcheck.exceptions import ConvCheckError

        assert issubclass(ConvCheckError, Exception)

    def test_signature_syntax_error(self) -> None:
        """SignatureSyntaxError is a TypeSignatureError."""
        from convcheck.exceptions import (
            ConvCheckError,
            SignatureSyntaxError,
            TypeSignatureError,
        )

        assert issubclass(SignatureSyntaxError, TypeSignatureError)
        assert issubclass(TypeSignatureError, ConvCheckError)

        err = SignatureSyntaxError("List<", 5, "Expected type name")
        assert str(err) == "Expected type name at position 5 in: List<"

    def test_unresolvable_type_error(self) -> None:
        """UnresolvableTypeError is a TypeSignatureError."""
        from convcheck.exceptions import TypeSignatureError, UnresolvableTypeError

        assert issubclass(UnresolvableTypeError, TypeSignatureError)

        err = UnresolvableTypeError("com.acme.Missing")
        assert "com.acme.Missing" in str(err)

    def test_conversion_error_is_value_error(self) -> None:
        """ConversionError can be caught as ValueError."""
        from convcheck.exceptions import ConvCheckError, ConversionError

        assert issubclass(ConversionError, ConvCheckError)
        assert issubclass(ConversionError, ValueError)

        err = ConversionError("int", "1X", 'Expected an integer value, got "1X"')
        assert str(err) == 'Expected an integer value, got "1X"'

    def test_configuration_error(self) -> None:
        """ConfigurationError is ConvCheckError subclass."""
        from convcheck.exceptions import ConfigurationError, ConvCheckError

        assert issubclass(ConfigurationError, ConvCheckError)


class TestExceptionAttributes:
    """Tests for exception attributes."""

    def test_syntax_error_attributes(self) -> None:
        """SignatureSyntaxError carries signature and position."""
        from convcheck.exceptions import SignatureSyntaxError

        err = SignatureSyntaxError("Foo<>", 4, "Expected type name")

        assert err.signature == "Foo<>"
        assert err.position == 4
        assert err.context == {
            "signature": "Foo<>",
            "position": 4,
            "reason": "Expected type name",
        }

    def test_conversion_error_attributes(self) -> None:
        """ConversionError carries type and value."""
        from convcheck.exceptions import ConversionError

        err = ConversionError("java.lang.Long", "x", "bad")

        assert err.type_name == "java.lang.Long"
        assert err.value == "x"

    def test_repr_includes_context(self) -> None:
        """repr shows message and context."""
        from convcheck.exceptions import UnresolvableTypeError

        assert "type_name" in repr(UnresolvableTypeError("X"))

    def test_custom_message(self) -> None:
        """Custom messages override the default."""
        from convcheck.exceptions import UnresolvableTypeError

        err = UnresolvableTypeError("X", message="class X not on classpath")
        assert str(err) == "class X not on classpath"

    def test_catch_all(self) -> None:
        """One except clause catches every convcheck error."""
        from convcheck.exceptions import ConvCheckError
        from convcheck.signature import parse_signature

        with pytest.raises(ConvCheckError):
            parse_signature("Map<")
