"""Delayed task scheduling interface."""

from typing import Callable, Protocol


class CancelHandle(Protocol):
    """Handle to a pending task."""

    def cancel(self) -> None:
        """Cancel the task if it has not run yet."""
        ...


class Scheduler(Protocol):
    """Interface for running a task once after a delay."""

    def schedule_after(self, delay: float, task: Callable[[], None]) -> CancelHandle:
        """Run task once, delay seconds from now."""
        ...
