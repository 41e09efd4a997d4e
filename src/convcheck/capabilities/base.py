"""
Conversion Capability Interfaces

A CapabilityProvider is what discovery finds in a project; it builds the
ConversionCapability that validators call into. One provider exists per
target configuration library.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from convcheck.project import ProjectContext
    from convcheck.validators import ConversionCheck


class ConversionCapability(ABC):
    """Project-scoped type resolution and single-value conversion."""

    capability_id: str = "unknown"

    @abstractmethod
    def resolve_type(self, type_name: str) -> str:
        """Resolve a raw type name.

        Args:
            type_name: Raw name from a type signature.

        Returns:
            Canonical type name.

        Raises:
            UnresolvableTypeError: If the name denotes no known type.
        """

    @abstractmethod
    def converter_for(self, type_name: str) -> ConversionCheck | None:
        """Return the conversion check for a resolved type name.

        Returns:
            Callable taking the raw string, raising ValueError on failure,
            or None if this capability cannot convert the type.
        """

    def convert(self, value: str, type_name: str) -> Any:
        """Convert ``value`` to ``type_name``.

        Raises:
            UnresolvableTypeError: If the type is unknown.
            ConversionError: If the value does not convert.
            LookupError: If no converter exists for the type.
        """
        canonical = self.resolve_type(type_name)
        check = self.converter_for(canonical)
        if check is None:
            raise LookupError(f"No converter for type: {canonical}")
        return check(value)


class CapabilityProvider(ABC):
    """Factory discovered in a project, building its ConversionCapability."""

    provider_id: str = "unknown"

    @abstractmethod
    def build(self, project: ProjectContext) -> ConversionCapability:
        """Build the capability for ``project``.

        Any exception marks this provider as unusable for the project;
        discovery moves on to the next candidate.
        """
