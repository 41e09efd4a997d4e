"""
convcheck Test Fixtures

Reusable test doubles for convcheck tests.
"""
from fixtures.capabilities import (
    CountingProvider,
    FailingProvider,
    FakeCapability,
    FakeEntryPoint,
    FakeProject,
    strict_int,
)

__all__ = [
    "CountingProvider",
    "FailingProvider",
    "FakeCapability",
    "FakeEntryPoint",
    "FakeProject",
    "strict_int",
]
