"""Tests for the memory probes."""

import tracemalloc

import pytest

from process_marker import memory


@pytest.fixture
def traced():
    tracemalloc.start()
    yield
    tracemalloc.stop()


def test_rss_bytes() -> None:
    assert memory.rss_bytes() > 0


def test_rss_falls_back_to_rusage(monkeypatch) -> None:
    """Test the rusage fallback when /proc is unavailable."""

    def no_proc(*args, **kwargs):
        raise OSError("no /proc")

    monkeypatch.setattr(memory, "open", no_proc, raising=False)
    assert memory.rss_bytes() > 0


def test_python_heap_untraced() -> None:
    if tracemalloc.is_tracing():
        pytest.skip("tracemalloc already running")
    assert memory.python_heap_bytes() is None


def test_python_heap_traced(traced) -> None:
    data = [bytes(1024) for _ in range(100)]
    assert memory.python_heap_bytes() >= 100 * 1024
    del data


def test_current_memory_prefers_heap(traced, monkeypatch) -> None:
    monkeypatch.setattr(memory, "rss_bytes", lambda: -1)
    assert memory.current_memory_bytes() >= 0
    assert memory.current_memory_bytes(real_usage=True) == -1
