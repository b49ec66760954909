"""Checkpoint marker reporting run time and memory usage."""

import itertools
import logging
import time
from collections.abc import Callable
from datetime import datetime
from functools import partial

from .config import DEFAULT_TIMESTAMP_FORMAT, MarkerConfig
from .interface import MarkerInterface, SupportsLogging
from .memory import current_memory_bytes

_LOGGER = logging.getLogger(__name__)

DECIMAL_PLACES = 3
BYTES_PER_MEGABYTE = 1024 * 1024

_ID_COUNTER = itertools.count()


def new_marker_id() -> str:
    """Return an id that is unique within this process."""
    return f"{int(time.time()):x}{next(_ID_COUNTER):05x}"


def format_seconds(seconds: float) -> str:
    return f"{seconds:,.{DECIMAL_PLACES}f}"


def format_memory(num_bytes: int, in_megabytes: bool = True) -> str:
    """Format a memory reading in megabytes or bytes."""
    if in_megabytes:
        return f"{num_bytes / BYTES_PER_MEGABYTE:,.{DECIMAL_PLACES}f} MBs"
    return f"{int(num_bytes)} Bytes"


class Marker(MarkerInterface):
    """Mark checkpoints throughout a process or script.

    Every checkpoint logs how long the work has been running and how much
    memory is in use. Misuse such as marking before starting is logged, never
    raised.

    Use the marker as a context manager so an unfinished run is reported when
    the block exits:

        with Marker("ETL Job", logger) as marker:
            marker.start()
            ...
            marker.mark("loaded")
            ...
            marker.finish()
    """

    def __init__(
        self,
        label: str,
        logger: SupportsLogging,
        memory_in_megabytes: bool = True,
        timestamp_format: str = "",
        *,
        config: MarkerConfig | None = None,
        memory_reader: Callable[[], int] | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        """Initialize."""
        if logger is None:
            raise TypeError("Marker requires a logger")

        if config is None:
            config = MarkerConfig(
                memory_in_megabytes=memory_in_megabytes,
                timestamp_format=timestamp_format,
            )

        self._label = label
        self._id = new_marker_id()
        self.logger = logger
        self.config = config

        self._memory_reader = memory_reader or partial(
            current_memory_bytes, config.real_memory_usage
        )
        self._clock = clock or time.perf_counter

        self.started_at: float | None = None
        self.start_wall_clock: str | None = None
        self.finished_duration_seconds: float | None = None
        self.start_memory_bytes: int | None = None
        self.finish_memory_bytes: int | None = None
        self.peak_memory_bytes = 0

        self.has_started = False
        self.has_finished = False
        self.closed = False

        _LOGGER.debug("Marker %s created for %s", self._id, label)

    @property
    def label(self) -> str:
        return self._label

    @property
    def id(self) -> str:
        return self._id

    def start(self, extra_info: str = "") -> None:
        """Start timing. Call once, before the work begins."""
        if self.has_started:
            return

        self.has_started = True
        self.started_at = self._now()
        self.start_wall_clock = self._wall_clock()
        memory = self.check_memory_usage()
        self.start_memory_bytes = memory

        message = "Marker {} for {} starting. Memory in use: {}.".format(
            self._id, self._label, self._format_memory(memory)
        )
        self.logger.info(self._with_detail(message, extra_info))

    def mark(self, extra_info: str = "") -> None:
        """Log a checkpoint. May be called any number of times."""
        if not self.has_started:
            # Start from the first mark rather than fail
            self.logger.warning(
                "Marker asked to mark, without being started correctly."
            )
            self.start()

        memory = self.check_memory_usage()

        message = (
            "Marker {} for {}. Memory in use: {}. "
            "Running for {} seconds, so far.".format(
                self._id,
                self._label,
                self._format_memory(memory),
                format_seconds(self.run_time()),
            )
        )
        self.logger.info(self._with_detail(message, extra_info))

    def finish(self, extra_info: str = "") -> None:
        """Stop timing and log the summary. Call once, when the work is done."""
        if self.has_finished:
            return

        self.has_finished = True
        self.finished_duration_seconds = self.run_time()
        self.finish_memory_bytes = self.check_memory_usage()

        message = (
            "Marker {} for script {} finished. Peak memory in use: {}. "
            "Started at: {}. Time to run: {} seconds".format(
                self._id,
                self._label,
                self._format_memory(self.peak_memory_bytes),
                self.start_wall_clock or "unknown",
                format_seconds(self.finished_duration_seconds),
            )
        )
        self.logger.info(self._with_detail(message, extra_info))

    def check_memory_usage(self) -> int:
        """Record a potential memory peak without logging."""
        memory = self._read_memory()
        if memory > self.peak_memory_bytes:
            self.peak_memory_bytes = memory
        return memory

    def run_time(self) -> float:
        """Seconds elapsed since start, 0 if not started."""
        if self.started_at is None:
            return 0.0
        now = self._now()
        if now is None:
            return 0.0
        return now - self.started_at

    def close(self) -> None:
        """Warn once if the marker reaches the end of its scope unfinished."""
        if self.closed:
            return
        self.closed = True

        if self.has_finished:
            return

        start_memory = self.start_memory_bytes or 0
        self.logger.warning(
            "Marker {} for script {} was not finished correctly. "
            "Peak memory in use: {} ({} diff to start usage). "
            "Time to run: {} seconds".format(
                self._id,
                self._label,
                self._format_memory(self.peak_memory_bytes),
                self._format_memory(self.peak_memory_bytes - start_memory),
                format_seconds(self.run_time()),
            )
        )

    def __enter__(self) -> "Marker":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    async def __aenter__(self) -> "Marker":
        return self

    async def __aexit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def _format_memory(self, num_bytes: int) -> str:
        return format_memory(num_bytes, self.config.memory_in_megabytes)

    def _with_detail(self, message: str, extra_info: str) -> str:
        if extra_info:
            message += f" Detail: {extra_info}"
        return message

    def _read_memory(self) -> int:
        try:
            return int(self._memory_reader())
        except Exception as e:
            _LOGGER.debug("Failed to read memory usage: %s", e)
            return 0

    def _now(self) -> float | None:
        try:
            return self._clock()
        except Exception as e:
            _LOGGER.debug("Failed to read clock: %s", e)
            return None

    def _wall_clock(self) -> str:
        now = datetime.now()
        try:
            return now.strftime(self.config.timestamp_format)
        except ValueError as e:
            _LOGGER.debug(
                "Bad timestamp format %r: %s", self.config.timestamp_format, e
            )
            return now.strftime(DEFAULT_TIMESTAMP_FORMAT)
