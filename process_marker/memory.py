"""Memory probes for the current process."""

import logging
import resource
import sys
import tracemalloc

_LOGGER = logging.getLogger(__name__)


def rss_bytes() -> int:
    """Get RSS memory usage in bytes."""
    try:
        with open("/proc/self/status", encoding="utf-8") as f:
            for line in f:
                if line.startswith("VmRSS:"):
                    # Reported in kB
                    return int(line.split()[1]) * 1024
    except (OSError, ValueError, IndexError):
        _LOGGER.debug("Could not read /proc/self/status")

    try:
        max_rss = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
    except (OSError, ValueError):
        _LOGGER.debug("Could not read rusage")
        return 0

    # ru_maxrss is kilobytes on Linux, bytes on macOS
    if sys.platform == "darwin":
        return max_rss
    return max_rss * 1024


def python_heap_bytes() -> int | None:
    """Get bytes allocated by the Python heap, if tracemalloc is tracing."""
    if not tracemalloc.is_tracing():
        return None
    cur, _peak = tracemalloc.get_traced_memory()
    return cur


def current_memory_bytes(real_usage: bool = False) -> int:
    """Get the memory reading used by markers.

    With ``real_usage`` the resident set size is always returned. Otherwise
    the traced Python heap is preferred and RSS is used when tracemalloc is
    not running.
    """
    if not real_usage:
        heap = python_heap_bytes()
        if heap is not None:
            return heap
    return rss_bytes()
