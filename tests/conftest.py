"""
PyTest Configuration for convcheck Tests

Provides fixtures, markers, and test setup.
"""
import sys
from pathlib import Path

import pytest

# Add src directory to path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

# Add tests directory to path for fixtures
tests_path = Path(__file__).parent
sys.path.insert(0, str(tests_path))


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "stress: mark test as stress test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


@pytest.fixture(autouse=True)
def reset_global_config():
    """Restore default global configuration around each test."""
    from convcheck.config import configure

    configure(reset=True)
    yield
    configure(reset=True)


@pytest.fixture
def fake_capability():
    """Capability converting only "int", strictly."""
    from fixtures.capabilities import FakeCapability

    return FakeCapability()


@pytest.fixture
def counting_provider(fake_capability):
    """Provider wrapping fake_capability and counting builds."""
    from fixtures.capabilities import CountingProvider

    return CountingProvider(fake_capability)


@pytest.fixture
def fake_project(counting_provider):
    """Project exposing counting_provider under the name "fake:Provider"."""
    from fixtures.capabilities import FakeProject

    return FakeProject(symbols={"fake:Provider": counting_provider})


@pytest.fixture
def fake_config():
    """Config using only the fake provider, no entry point scan."""
    from convcheck.config import ConvCheckConfig

    return ConvCheckConfig(provider_names=("fake:Provider",), discovery_enabled=False)


@pytest.fixture
def session(fake_project, fake_config):
    """ValidationSession bound to the fake project."""
    from convcheck.session import ValidationSession

    return ValidationSession(fake_project, fake_config)


@pytest.fixture
def standard_session():
    """ValidationSession using the built-in standard provider."""
    from convcheck.project import ProjectContext
    from convcheck.session import ValidationSession

    return ValidationSession(ProjectContext("standard"))
