"""Fixtures for tests."""

import logging

import pytest

_SINK_NAME = "tests.marker"


class FakeMemory:
    """Memory reader returning a settable value."""

    def __init__(self, value: int = 0) -> None:
        self.value = value
        self.error: Exception | None = None

    def __call__(self) -> int:
        if self.error is not None:
            raise self.error
        return self.value


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, now: float = 100.0) -> None:
        self.now = now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def memory():
    return FakeMemory(1024 * 1024)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def logger(caplog):
    """Return the logger used as a marker's sink, captured at info level."""
    caplog.set_level(logging.INFO, logger=_SINK_NAME)
    return logging.getLogger(_SINK_NAME)


@pytest.fixture
def sink_records(caplog):
    """Return a function listing records emitted through the sink."""

    def _records():
        return [r for r in caplog.records if r.name == _SINK_NAME]

    return _records
