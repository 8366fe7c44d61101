"""
Frame clocks that drive the game loop one callback per frame.
"""
import asyncio
import itertools
from typing import Dict, Optional

from .types import FrameCallback


class ManualFrameClock:
    """Frame clock advanced by hand, for tests and headless runs."""

    def __init__(self):
        self._ids = itertools.count(1)
        self._callbacks: Dict[int, FrameCallback] = {}
        self.now_ms: float = 0.0

    @property
    def pending(self) -> int:
        return len(self._callbacks)

    def request_frame(self, callback: FrameCallback) -> int:
        handle = next(self._ids)
        self._callbacks[handle] = callback
        return handle

    def cancel_frame(self, handle: int) -> None:
        self._callbacks.pop(handle, None)

    def advance(self, timestamp_ms: Optional[float] = None) -> int:
        """
        Present one frame: fire every callback registered before this call.

        Returns:
            Number of callbacks fired
        """
        self.now_ms = self.now_ms + 16.0 if timestamp_ms is None else timestamp_ms
        due, self._callbacks = self._callbacks, {}
        for callback in due.values():
            callback(self.now_ms)
        return len(due)


class AsyncioFrameClock:
    """Frame clock backed by the running asyncio event loop at a fixed rate."""

    def __init__(self, fps: int, loop: Optional[asyncio.AbstractEventLoop] = None):
        self.interval = 1.0 / fps
        self._loop = loop
        self._ids = itertools.count(1)
        self._timers: Dict[int, asyncio.TimerHandle] = {}

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    @property
    def pending(self) -> int:
        return len(self._timers)

    def request_frame(self, callback: FrameCallback) -> int:
        handle = next(self._ids)
        self._timers[handle] = self.loop.call_later(self.interval, self._fire, handle, callback)
        return handle

    def cancel_frame(self, handle: int) -> None:
        timer = self._timers.pop(handle, None)
        if timer is not None:
            timer.cancel()

    def cancel_all(self) -> None:
        for handle in list(self._timers):
            self.cancel_frame(handle)

    def _fire(self, handle: int, callback: FrameCallback) -> None:
        if self._timers.pop(handle, None) is None:
            return
        callback(self.loop.time() * 1000.0)
