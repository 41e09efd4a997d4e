"""Tests for the validator cache."""
from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from convcheck.cache import ValidatorCache, normalize_signature
from convcheck.validators import ScalarValidator


def make_factory(counter: list[int]):
    def factory() -> ScalarValidator:
        counter.append(1)
        return ScalarValidator("int", None)
    return factory


class TestNormalize:
    """Tests for signature normalization."""

    def test_strips_outer_whitespace(self) -> None:
        """Outer whitespace does not create new keys."""
        assert normalize_signature("  int[] \n") == "int[]"

    def test_inner_spelling_preserved(self) -> None:
        """Inner whitespace differences are distinct keys."""
        assert normalize_signature("Map<A,B>") != normalize_signature("Map<A, B>")


class TestValidatorCache:
    """Tests for ValidatorCache."""

    def test_miss_then_hit(self) -> None:
        """Second lookup returns the same instance without building."""
        cache = ValidatorCache()
        built: list[int] = []

        first = cache.get_or_create("int", make_factory(built))
        second = cache.get_or_create("int", make_factory(built))

        assert first is second
        assert len(built) == 1
        assert cache.stats()["hits"] == 1
        assert cache.stats()["misses"] == 1

    def test_keys_normalized(self) -> None:
        """Whitespace-padded signatures share the entry."""
        cache = ValidatorCache()
        built: list[int] = []

        cache.get_or_create("int", make_factory(built))
        cache.get_or_create(" int ", make_factory(built))

        assert len(built) == 1
        assert " int" in cache

    def test_structurally_equal_spellings_are_separate(self) -> None:
        """Keys are strings, not descriptor structure."""
        cache = ValidatorCache()
        built: list[int] = []

        cache.get_or_create("Map<A,B>", make_factory(built))
        cache.get_or_create("Map<A, B>", make_factory(built))

        assert len(built) == 2
        assert cache.size() == 2

    def test_factory_error_not_cached(self) -> None:
        """A failing factory leaves no entry."""
        cache = ValidatorCache()

        def boom():
            raise ValueError("bad signature")

        with pytest.raises(ValueError):
            cache.get_or_create("x", boom)

        assert cache.get("x") is None
        assert cache.size() == 0

    def test_clear(self) -> None:
        """clear() empties the cache and bumps the generation."""
        cache = ValidatorCache()
        cache.get_or_create("int", make_factory([]))
        cache.get_or_create("long", make_factory([]))

        assert cache.clear() == 2
        assert cache.size() == 0
        assert cache.generation == 1

    def test_build_racing_clear_is_not_stored(self) -> None:
        """A validator built across a clear() is returned but not cached."""
        cache = ValidatorCache()

        def factory():
            cache.clear()
            return ScalarValidator("int", None)

        validator = cache.get_or_create("int", factory)

        assert validator is not None
        assert cache.get("int") is None

    def test_first_writer_wins(self) -> None:
        """Concurrent builders converge on one stored instance."""
        cache = ValidatorCache()
        barrier = threading.Barrier(6)

        def factory():
            return ScalarValidator("int", None)

        def worker(_):
            barrier.wait()
            return cache.get_or_create("int", factory)

        with ThreadPoolExecutor(max_workers=6) as pool:
            results = list(pool.map(worker, range(6)))

        stored = cache.get("int")
        assert all(r is stored for r in results)
