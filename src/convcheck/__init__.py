"""
convcheck - Type-Signature Driven Validation of Configuration Values

Checks that raw configuration strings convert to declared generic types
such as ``java.util.List<java.lang.Integer>`` and reports offset-accurate
diagnostics for the elements that do not.

Main APIs:
- parse_signature(): Parse a type signature into a TypeDescriptor
- resolve_validator(): Build a Validator tree for a TypeDescriptor
- ValidationSession: Per-project validation with cached validators
- SessionRegistry: One session per project, reset on classpath change
- configure() / load_config(): Global configuration
"""

__version__ = "0.1.0"

from convcheck.bridge import CapabilityState, RuntimeCapabilityBridge
from convcheck.cache import ValidatorCache, normalize_signature
from convcheck.capabilities import (
    CapabilityProvider,
    ConversionCapability,
    StandardConversionCapability,
    StandardConversionProvider,
)
from convcheck.config import (
    ConvCheckConfig,
    configure,
    get_config,
    load_config,
    load_env,
)
from convcheck.diagnostics import (
    ALL_DIAGNOSTIC_CODES,
    VALUE_CONVERSION_FAILED,
    Diagnostic,
    DiagnosticList,
    DiagnosticsCollector,
)
from convcheck.exceptions import (
    ConfigurationError,
    ConversionError,
    ConvCheckError,
    SignatureSyntaxError,
    TypeSignatureError,
    UnresolvableTypeError,
)
from convcheck.project import ProjectContext
from convcheck.resolver import (
    DEFAULT_STRUCTURAL_CATEGORIES,
    StructuralCategory,
    classify,
    resolve_validator,
)
from convcheck.session import SessionRegistry, ValidationSession
from convcheck.signature import TypeDescriptor, parse_signature
from convcheck.validators import (
    CollectionValidator,
    PassThroughValidator,
    ScalarValidator,
    Validator,
)

__all__ = [
    "__version__",
    # Signatures
    "TypeDescriptor",
    "parse_signature",
    # Resolution
    "DEFAULT_STRUCTURAL_CATEGORIES",
    "StructuralCategory",
    "classify",
    "resolve_validator",
    # Validators
    "CollectionValidator",
    "PassThroughValidator",
    "ScalarValidator",
    "Validator",
    # Capabilities
    "CapabilityProvider",
    "CapabilityState",
    "ConversionCapability",
    "RuntimeCapabilityBridge",
    "StandardConversionCapability",
    "StandardConversionProvider",
    # Sessions
    "ProjectContext",
    "SessionRegistry",
    "ValidationSession",
    "ValidatorCache",
    "normalize_signature",
    # Diagnostics
    "ALL_DIAGNOSTIC_CODES",
    "VALUE_CONVERSION_FAILED",
    "Diagnostic",
    "DiagnosticList",
    "DiagnosticsCollector",
    # Configuration
    "ConvCheckConfig",
    "configure",
    "get_config",
    "load_config",
    "load_env",
    # Exceptions
    "ConfigurationError",
    "ConversionError",
    "ConvCheckError",
    "SignatureSyntaxError",
    "TypeSignatureError",
    "UnresolvableTypeError",
]
