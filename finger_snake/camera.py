"""
Webcam frame source backed by OpenCV.
"""
import logging
import time
from typing import Optional

import cv2
import numpy as np

from .config import CameraConfig
from .errors import CameraUnavailableError
from .types import CapturedFrame

logger = logging.getLogger(__name__)


class CameraSource:
    """Reads mirrored frames from a webcam and stamps them with capture time."""

    def __init__(self, cfg: CameraConfig):
        self.cfg = cfg
        self.cap: Optional[cv2.VideoCapture] = None
        self.latest: Optional[np.ndarray] = None
        self._paused = False
        self._last_ts = -1

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def is_open(self) -> bool:
        return self.cap is not None and self.cap.isOpened()

    def open(self) -> None:
        if self.is_open:
            return
        self.cap = cv2.VideoCapture(self.cfg.index)
        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.cfg.width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.cfg.height)
        self.cap.set(cv2.CAP_PROP_FPS, self.cfg.fps)

        if not self.cap.isOpened():
            self.cap = None
            raise CameraUnavailableError(f"Failed to open camera {self.cfg.index}")
        logger.info("Camera %d opened", self.cfg.index)

    def read(self) -> Optional[CapturedFrame]:
        if self._paused or not self.is_open:
            return None

        ret, frame = self.cap.read()
        if not ret:
            logger.debug("Failed to read frame from camera")
            return None

        if self.cfg.mirror:
            frame = cv2.flip(frame, 1)
        if frame.shape[1] != self.cfg.width or frame.shape[0] != self.cfg.height:
            frame = cv2.resize(frame, (self.cfg.width, self.cfg.height))
        self.latest = frame

        # MediaPipe video mode needs strictly increasing timestamps.
        ts = max(int(time.monotonic() * 1000), self._last_ts + 1)
        self._last_ts = ts
        return CapturedFrame(image=frame, timestamp_ms=ts)

    def toggle_pause(self) -> bool:
        self._paused = not self._paused
        if self._paused:
            self.latest = None
        return self._paused

    def release(self) -> None:
        if self.cap is not None:
            self.cap.release()
            self.cap = None
