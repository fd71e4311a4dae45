"""
Event-loop backed scheduler.
"""

import asyncio
from typing import Callable, Optional

from .interfaces import ITimerHandle


class AsyncioScheduler:
    """Schedules callbacks on the running asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> ITimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay_ms / 1000, callback)
