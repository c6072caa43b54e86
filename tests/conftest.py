import pytest

from climasync import MemoryStore

from tests.unit.mocks import FakeGateway, RecordingRefresh, make_context


@pytest.fixture
def store() -> MemoryStore:
    """Provides an empty in-memory state store."""
    return MemoryStore()


@pytest.fixture
def gateway() -> FakeGateway:
    """Provides an authenticated fake gateway with one controller."""
    return FakeGateway()


@pytest.fixture
def refresh() -> RecordingRefresh:
    """Provides a refresh callable that counts its invocations."""
    return RecordingRefresh()


@pytest.fixture
def context(gateway, store, refresh):
    """Provides a context with millisecond timings."""
    return make_context(gateway, store, refresh)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line("markers", "slow: marks tests as slow running")
