"""
convcheck Capabilities

Conversion capability interfaces and the built-in standard provider.
"""
from convcheck.capabilities.base import CapabilityProvider, ConversionCapability
from convcheck.capabilities.standard import (
    StandardConversionCapability,
    StandardConversionProvider,
)

__all__ = [
    "CapabilityProvider",
    "ConversionCapability",
    "StandardConversionCapability",
    "StandardConversionProvider",
]
