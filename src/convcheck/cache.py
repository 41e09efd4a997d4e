"""Validator cache.

Memoizes validator trees per normalized signature string for the lifetime
of a session. Entries are only dropped in bulk by ``clear()``, which the
session wires to its capability bridge reset.
"""
from __future__ import annotations

import logging
from threading import RLock
from typing import Any, Callable

from convcheck.validators import Validator

logger = logging.getLogger(__name__)


def normalize_signature(signature: str) -> str:
    """Normalize a signature for use as cache key.

    Only outer whitespace is removed: structurally equal but differently
    spelled signatures get separate entries.
    """
    return signature.strip()


class ValidatorCache:
    """Thread-safe populate-or-fetch cache of validators.

    Factories run outside the lock. The first writer for a key wins and
    every caller converges on that instance. A generation counter keeps
    a validator built before ``clear()`` from being stored after it.
    """

    def __init__(self) -> None:
        """Initialize an empty cache."""
        self._cache: dict[str, Validator] = {}
        self._lock = RLock()
        self._generation = 0
        self._hits = 0
        self._misses = 0

    @property
    def generation(self) -> int:
        """Number of times the cache was cleared."""
        with self._lock:
            return self._generation

    def get(self, signature: str) -> Validator | None:
        """Get the cached validator for a signature, if any."""
        key = normalize_signature(signature)
        with self._lock:
            return self._cache.get(key)

    def get_or_create(
        self,
        signature: str,
        factory: Callable[[], Validator],
    ) -> Validator:
        """Return the cached validator, building it with ``factory`` on a miss.

        Args:
            signature: Signature string (normalized internally).
            factory: Builds the validator; exceptions propagate and
                nothing is cached.

        Returns:
            The validator stored for the signature.
        """
        key = normalize_signature(signature)

        with self._lock:
            validator = self._cache.get(key)
            if validator is not None:
                self._hits += 1
                logger.debug("Validator cache hit for %s", key)
                return validator
            self._misses += 1
            generation = self._generation

        logger.debug("Validator cache miss for %s", key)
        built = factory()

        with self._lock:
            if generation != self._generation:
                # Cleared while building; do not repopulate with a stale tree.
                return built
            return self._cache.setdefault(key, built)

    def clear(self) -> int:
        """Remove all entries.

        Returns:
            Number of entries cleared.
        """
        with self._lock:
            count = len(self._cache)
            self._cache.clear()
            self._generation += 1
            logger.debug("Cleared %d validator cache entries", count)
            return count

    def size(self) -> int:
        """Get current cache size."""
        with self._lock:
            return len(self._cache)

    def __contains__(self, signature: str) -> bool:
        with self._lock:
            return normalize_signature(signature) in self._cache

    def stats(self) -> dict[str, Any]:
        """Get cache statistics."""
        with self._lock:
            return {
                "size": len(self._cache),
                "hits": self._hits,
                "misses": self._misses,
                "generation": self._generation,
            }
