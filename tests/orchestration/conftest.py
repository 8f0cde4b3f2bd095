"""Fixtures for workflow interpreter tests."""

import pytest

from orchestration.registry import InMemoryExecutionStore, InMemoryWorkflowRegistry


class FakeEventBus:
    """Fake EventBus for testing."""

    def __init__(self) -> None:
        self.events: list = []

    async def publish(self, event) -> None:
        self.events.append(event)

    def subscribe(self, event_name: str, handler: object) -> None:
        pass

    @property
    def names(self) -> list[str]:
        return [event.name for event in self.events]


class FakeSleeper:
    """Records requested delays instead of sleeping."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def registry() -> InMemoryWorkflowRegistry:
    return InMemoryWorkflowRegistry()


@pytest.fixture
def store() -> InMemoryExecutionStore:
    return InMemoryExecutionStore()


@pytest.fixture
def bus() -> FakeEventBus:
    return FakeEventBus()


@pytest.fixture
def sleeper() -> FakeSleeper:
    return FakeSleeper()
