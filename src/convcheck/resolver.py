"""
Converter Resolution

Maps TypeDescriptor trees to Validator trees by structural category:

| Raw shape                          | Arity | Validator                        |
|------------------------------------|-------|----------------------------------|
| List<T> / Set<T> / T[]             | 1     | CollectionValidator(resolve(T))  |
| Map<K, V>                          | 2     | resolve(K), value side discarded |
| Optional<T>                        | 1     | PassThroughValidator(resolve(T)) |
| Supplier<T> / Provider<T>          | 1     | resolve(T)                       |
| anything else                      | any   | ScalarValidator                  |

Resolution is purely structural and never instantiates target types.
"""
from __future__ import annotations

import logging
from enum import Enum, unique
from typing import TYPE_CHECKING, Mapping

from convcheck.diagnostics import DEFAULT_SOURCE
from convcheck.signature import TypeDescriptor
from convcheck.validators import (
    CollectionValidator,
    PassThroughValidator,
    ScalarValidator,
    Validator,
)

if TYPE_CHECKING:
    from convcheck.bridge import RuntimeCapabilityBridge

logger = logging.getLogger(__name__)


@unique
class StructuralCategory(str, Enum):
    """Shape classification driving resolution dispatch."""

    SCALAR = "scalar"
    COLLECTION = "collection"
    MAP = "map"
    OPTIONAL = "optional"
    WRAPPER = "wrapper"


CATEGORY_ARITY: dict[StructuralCategory, int] = {
    StructuralCategory.COLLECTION: 1,
    StructuralCategory.MAP: 2,
    StructuralCategory.OPTIONAL: 1,
    StructuralCategory.WRAPPER: 1,
}

DEFAULT_STRUCTURAL_CATEGORIES: dict[str, StructuralCategory] = {
    "java.util.List": StructuralCategory.COLLECTION,
    "java.util.Set": StructuralCategory.COLLECTION,
    "java.util.Map": StructuralCategory.MAP,
    "java.util.Optional": StructuralCategory.OPTIONAL,
    "java.util.function.Supplier": StructuralCategory.WRAPPER,
    "jakarta.inject.Provider": StructuralCategory.WRAPPER,
    "javax.inject.Provider": StructuralCategory.WRAPPER,
}


def classify(
    descriptor: TypeDescriptor,
    categories: Mapping[str, StructuralCategory] | None = None,
) -> StructuralCategory:
    """Classify a descriptor's shape.

    A generic category only applies when the descriptor carries exactly
    the category's arity; otherwise the descriptor is a scalar.

    Args:
        descriptor: Descriptor to classify.
        categories: Raw name -> category table. Defaults to
            DEFAULT_STRUCTURAL_CATEGORIES.
    """
    if descriptor.is_array:
        return StructuralCategory.COLLECTION

    table = DEFAULT_STRUCTURAL_CATEGORIES if categories is None else categories
    category = table.get(descriptor.raw_name, StructuralCategory.SCALAR)
    if category is StructuralCategory.SCALAR:
        return category
    if descriptor.arity != CATEGORY_ARITY[category]:
        return StructuralCategory.SCALAR
    return category


def resolve_validator(
    descriptor: TypeDescriptor,
    bridge: RuntimeCapabilityBridge,
    categories: Mapping[str, StructuralCategory] | None = None,
    source: str = DEFAULT_SOURCE,
) -> Validator:
    """Resolve a descriptor into a Validator tree.

    Every structural node has a single validated child, so the tree is a
    chain of wrappers over one scalar. It is built with loops, not
    recursion, and nesting depth is unbounded.

    Args:
        descriptor: Parsed type signature.
        bridge: Bridge supplying the conversion capability.
        categories: Raw name -> category table.
        source: Source identifier attached to diagnostics.

    Returns:
        Root of the validator tree.

    Raises:
        UnresolvableTypeError: If a scalar type name is unknown to the
            capability.
    """
    discarded: list[TypeDescriptor] = []
    validator = _resolve_chain(descriptor, bridge, categories, source, discarded)
    # Map value sides are resolved for their errors only.
    while discarded:
        _resolve_chain(discarded.pop(), bridge, categories, source, discarded)
    return validator


def _resolve_chain(
    descriptor: TypeDescriptor,
    bridge: RuntimeCapabilityBridge,
    categories: Mapping[str, StructuralCategory] | None,
    source: str,
    discarded: list[TypeDescriptor],
) -> Validator:
    wrappers: list[type[CollectionValidator] | type[PassThroughValidator]] = []
    map_values: list[TypeDescriptor] = []
    node = descriptor
    while True:
        category = classify(node, categories)
        if category is StructuralCategory.COLLECTION:
            wrappers.append(CollectionValidator)
            node = node.component_type() if node.is_array else node.type_arguments[0]
        elif category is StructuralCategory.MAP:
            node, value = node.type_arguments
            map_values.append(value)
        elif category is StructuralCategory.OPTIONAL:
            wrappers.append(PassThroughValidator)
            node = node.type_arguments[0]
        elif category is StructuralCategory.WRAPPER:
            node = node.type_arguments[0]
        else:
            break

    validator: Validator = _resolve_scalar(node, bridge, source)
    for wrapper in reversed(wrappers):
        validator = wrapper(validator)
    # Innermost value side first, matching key-before-value order.
    discarded.extend(map_values)
    return validator


def _resolve_scalar(
    descriptor: TypeDescriptor,
    bridge: RuntimeCapabilityBridge,
    source: str,
) -> ScalarValidator:
    capability = bridge.get_capability()
    if capability is None:
        return ScalarValidator(descriptor.raw_name, None, source)

    type_name = capability.resolve_type(descriptor.raw_name)
    check = capability.converter_for(type_name)
    if check is None:
        logger.debug(
            "No converter for %s from capability %s",
            type_name,
            capability.capability_id,
        )
    return ScalarValidator(type_name, check, source)
