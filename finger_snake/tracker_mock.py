"""
Scripted stand-ins for the camera and the hand tracker.
"""
import logging
import math
from typing import Iterable, List, Optional, Tuple

from .errors import CameraUnavailableError
from .types import CapturedFrame

logger = logging.getLogger(__name__)


class MockFrameSource:
    """Frame source that emits blank frames with increasing timestamps."""

    def __init__(self, fail_open: bool = False, frame_step_ms: int = 33):
        self.fail_open = fail_open
        self.frame_step_ms = frame_step_ms
        self.timestamp_ms = 0
        self.opened = False
        self.read_count = 0
        self.hold = False
        self._paused = False

    @property
    def paused(self) -> bool:
        return self._paused

    def open(self) -> None:
        if self.fail_open:
            raise CameraUnavailableError("Permission denied")
        self.opened = True

    def read(self) -> Optional[CapturedFrame]:
        if not self.opened or self._paused:
            return None
        self.read_count += 1
        # hold=True repeats the previous frame, as a camera slower than the display does.
        if not self.hold:
            self.timestamp_ms += self.frame_step_ms
        return CapturedFrame(image=None, timestamp_ms=self.timestamp_ms)

    def toggle_pause(self) -> bool:
        self._paused = not self._paused
        return self._paused

    def release(self) -> None:
        self.opened = False


class MockTracker:
    """Tracker that replays a script of normalized fingertip positions."""

    def __init__(self, script: Iterable[Optional[Tuple[float, float]]] = (), repeat_last: bool = True):
        self.script: List[Optional[Tuple[float, float]]] = list(script)
        self.repeat_last = repeat_last
        self.calls: List[int] = []
        self.closed = False

    def push(self, *points: Optional[Tuple[float, float]]) -> None:
        self.script.extend(points)

    def detect(self, frame, timestamp_ms: int) -> Optional[Tuple[float, float]]:
        self.calls.append(timestamp_ms)
        if not self.script:
            return None
        if len(self.script) == 1 and self.repeat_last:
            return self.script[0]
        return self.script.pop(0)

    def close(self) -> None:
        self.closed = True
        logger.debug("[MockTracker] closed after %d detections", len(self.calls))


class CirclingTracker:
    """Demo tracker whose fingertip sweeps a slowly widening circle."""

    def __init__(self, period_ms: float = 4000.0):
        self.period_ms = period_ms
        self.closed = False

    def detect(self, frame, timestamp_ms: int) -> Optional[Tuple[float, float]]:
        phase = 2 * math.pi * (timestamp_ms % self.period_ms) / self.period_ms
        radius = 0.15 + 0.1 * math.sin(timestamp_ms / 9000.0)
        return (0.5 + radius * math.cos(phase), 0.5 + radius * math.sin(phase))

    def close(self) -> None:
        self.closed = True
