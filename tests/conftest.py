"""
Shared pytest fixtures for all tests.
"""
import asyncio
import tempfile
from pathlib import Path
from typing import Any, AsyncIterator, Callable, Iterator

import pytest

from core.context import RequestContext
from core.persistence import InMemoryPersistence
from core.pricing import ModelPricing, PricingTable
from core.state import active_signals

TEST_MODEL = "test-vendor/test-model"


class ManualClock:
    """Millisecond clock advanced explicitly by tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Set up mock provider keys so no real credentials are required."""
    monkeypatch.setenv("OPENROUTER_API_KEY", "test-openrouter-key")
    monkeypatch.setenv("PARALLEL_API_KEY", "test-parallel-key")
    return monkeypatch


@pytest.fixture
def no_env_keys(monkeypatch):
    """Remove provider keys from the environment."""
    monkeypatch.delenv("OPENROUTER_API_KEY", raising=False)
    monkeypatch.delenv("PARALLEL_API_KEY", raising=False)
    return monkeypatch


@pytest.fixture
def pricing() -> PricingTable:
    """Pricing table with one known model at $1 / $2 per million tokens."""
    return PricingTable({TEST_MODEL: ModelPricing(1.0, 2.0)})


@pytest.fixture
def context() -> RequestContext:
    """Request context for a thread with search disabled."""
    return RequestContext(model_id=TEST_MODEL, user_id="user-1", thread_id="thread-1")


@pytest.fixture
def search_context() -> RequestContext:
    """Request context with search enabled."""
    return RequestContext(
        model_id=TEST_MODEL, user_id="user-1", thread_id="thread-1", search_enabled=True
    )


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def persistence() -> InMemoryPersistence:
    return InMemoryPersistence()


@pytest.fixture
def make_stream() -> Callable[..., AsyncIterator[Any]]:
    """
    Build an async event source from a list of events.

    Items may be events, callables (run for their side effects, e.g. to
    advance a clock or fire an abort) or exceptions (raised in place).
    ``hang=True`` blocks forever after the last item.
    """

    def _make(*items: Any, hang: bool = False) -> AsyncIterator[Any]:
        async def _gen():
            for item in items:
                if isinstance(item, BaseException):
                    raise item
                if callable(item):
                    item()
                    continue
                yield item
            if hang:
                await asyncio.Event().wait()

        return _gen()

    return _make


@pytest.fixture(autouse=True)
def clear_active_signals():
    """Clear registered abort signals before and after each test."""
    active_signals.clear()
    yield
    active_signals.clear()


@pytest.fixture(autouse=True)
def isolate_config(temp_dir: Path, monkeypatch):
    """Load configuration from an empty directory instead of the user's home."""
    from config import get_config

    monkeypatch.setenv("HOME", str(temp_dir))
    monkeypatch.chdir(temp_dir)
    get_config.cache_clear()
    yield
    get_config.cache_clear()
