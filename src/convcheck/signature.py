"""
Type Signature Parsing

Parses generic type signatures such as ``java.util.List<java.lang.String>``
into TypeDescriptor trees.

Grammar::

    type       := identifier ( '<' type (',' type)* '>' )?
    identifier := one or more characters other than '<', '>', ',' and
                  whitespace

The parser is a single left-to-right pass without backtracking. Open
generic types are kept on an explicit stack, so nesting depth is bounded
only by the input length.
"""
from __future__ import annotations

from dataclasses import dataclass

from convcheck.exceptions import SignatureSyntaxError

ARRAY_SUFFIX = "[]"

_BOUNDARY_CHARS = frozenset("<>,")


@dataclass(frozen=True, slots=True, eq=False)
class TypeDescriptor:
    """Parsed generic type signature.

    Immutable and compared structurally. Equality, hashing and str() walk
    the tree without recursion.

    Attributes:
        raw_name: Type name without type arguments (e.g. "java.util.List").
        type_arguments: Ordered type arguments, empty for non-generic types.
    """

    raw_name: str
    type_arguments: tuple[TypeDescriptor, ...] = ()

    def __post_init__(self) -> None:
        if not self.raw_name:
            raise ValueError("raw_name must be non-empty")

    def __str__(self) -> str:
        """Return the canonical signature text."""
        parts: list[str] = []
        pending: list[TypeDescriptor | str] = [self]
        while pending:
            item = pending.pop()
            if isinstance(item, str):
                parts.append(item)
                continue
            parts.append(item.raw_name)
            if item.type_arguments:
                pending.append(">")
                for index in range(item.arity - 1, -1, -1):
                    pending.append(item.type_arguments[index])
                    if index:
                        pending.append(", ")
                pending.append("<")
        return "".join(parts)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TypeDescriptor):
            return NotImplemented
        pairs = [(self, other)]
        while pairs:
            left, right = pairs.pop()
            if left is right:
                continue
            if left.raw_name != right.raw_name or left.arity != right.arity:
                return False
            pairs.extend(zip(left.type_arguments, right.type_arguments))
        return True

    def __hash__(self) -> int:
        return hash(str(self))

    @property
    def arity(self) -> int:
        """Number of type arguments."""
        return len(self.type_arguments)

    @property
    def is_array(self) -> bool:
        """Whether the raw name denotes an array (``int[]``)."""
        return (
            not self.type_arguments
            and self.raw_name.endswith(ARRAY_SUFFIX)
            and len(self.raw_name) > len(ARRAY_SUFFIX)
        )

    def component_type(self) -> TypeDescriptor:
        """Return the element type of an array descriptor.

        Raises:
            ValueError: If the descriptor is not an array.
        """
        if not self.is_array:
            raise ValueError(f"{self.raw_name} is not an array type")
        return TypeDescriptor(self.raw_name[: -len(ARRAY_SUFFIX)])


def parse_signature(signature: str) -> TypeDescriptor:
    """Parse a type signature.

    Args:
        signature: Signature text, e.g.
            ``"java.util.Map<java.lang.String, java.lang.Integer>"``.

    Returns:
        TypeDescriptor tree for the signature.

    Raises:
        SignatureSyntaxError: If the grammar is violated.
    """
    return _Parser(signature).parse()


class _Parser:
    """Cursor over one signature string."""

    __slots__ = ("_text", "_pos")

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0

    def parse(self) -> TypeDescriptor:
        # Open generic types waiting for their closing '>'
        frames: list[tuple[str, list[TypeDescriptor]]] = []
        while True:
            raw_name = self._read_name()
            self._skip_spaces()
            if self._peek() == "<":
                self._pos += 1  # '<'
                frames.append((raw_name, []))
                continue

            node = TypeDescriptor(raw_name)
            while frames:
                frames[-1][1].append(node)
                self._skip_spaces()
                if self._peek() == ",":
                    self._pos += 1
                    break
                self._expect(">")
                name, args = frames.pop()
                node = TypeDescriptor(name, tuple(args))
            else:
                break

        self._skip_spaces()
        if self._pos < len(self._text):
            self._fail(f"Unexpected '{self._text[self._pos]}'")
        return node

    def _read_name(self) -> str:
        self._skip_spaces()
        start = self._pos
        raw_name = self._read_identifier()
        if not raw_name:
            self._fail("Expected type name", start)
        return raw_name

    def _read_identifier(self) -> str:
        text = self._text
        start = self._pos
        while self._pos < len(text) and not _is_boundary(text[self._pos]):
            self._pos += 1
        return text[start:self._pos]

    def _peek(self) -> str:
        if self._pos < len(self._text):
            return self._text[self._pos]
        return ""

    def _skip_spaces(self) -> None:
        text = self._text
        while self._pos < len(text) and text[self._pos].isspace():
            self._pos += 1

    def _expect(self, char: str) -> None:
        if self._peek() != char:
            found = self._peek()
            reason = f"Expected '{char}'"
            if found:
                reason += f" but found '{found}'"
            else:
                reason += " but reached end of input"
            self._fail(reason)
        self._pos += 1

    def _fail(self, reason: str, position: int | None = None) -> None:
        raise SignatureSyntaxError(
            self._text,
            self._pos if position is None else position,
            reason,
        )


def _is_boundary(char: str) -> bool:
    return char in _BOUNDARY_CHARS or char.isspace()
