"""
Notification module interfaces.
"""

from typing import Callable, Protocol, runtime_checkable


@runtime_checkable
class ITimerHandle(Protocol):
    def cancel(self) -> None:
        ...


@runtime_checkable
class IScheduler(Protocol):
    """
    One-shot timer source.

    The queue never reads the clock itself; swapping the scheduler is how
    tests control when notifications expire.
    """

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> ITimerHandle:
        """Run callback once after delay_ms milliseconds."""
        ...
