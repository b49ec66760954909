"""Contracts between markers and their logging sinks."""

from abc import ABC, abstractmethod
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class SupportsLogging(Protocol):
    """Anything that accepts info and warning messages, e.g. logging.Logger."""

    def info(self, msg: Any, *args: Any, **kwargs: Any) -> None: ...

    def warning(self, msg: Any, *args: Any, **kwargs: Any) -> None: ...


class MarkerInterface(ABC):
    """Checkpoint marker for a process or script."""

    @abstractmethod
    def start(self, extra_info: str = "") -> None:
        """Mark the start of the tracked work."""

    @abstractmethod
    def mark(self, extra_info: str = "") -> None:
        """Mark a checkpoint while the work is running."""

    @abstractmethod
    def finish(self, extra_info: str = "") -> None:
        """Mark the end of the tracked work."""
