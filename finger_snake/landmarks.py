"""
Hand landmark detection using the MediaPipe Tasks HandLandmarker.
"""
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import cv2
import mediapipe as mp
import numpy as np
import requests
from mediapipe.tasks import python as mp_tasks
from mediapipe.tasks.python import vision

from .config import MediaPipeConfig
from .errors import TrackerInitError

logger = logging.getLogger(__name__)

INDEX_FINGER_TIP = 8


def fingertip(landmarks: Sequence[Tuple[float, float]]) -> Optional[Tuple[float, float]]:
    """
    Pick the index fingertip out of a hand's landmarks.

    Args:
        landmarks: Normalized (x, y) landmarks of one hand

    Returns:
        (x, y) of landmark 8 in [0..1] range, or None if the hand is incomplete
    """
    if len(landmarks) <= INDEX_FINGER_TIP:
        return None
    return landmarks[INDEX_FINGER_TIP]


def ensure_model(path: str, url: str, timeout: float = 30.0) -> Path:
    """Download the landmarker model to ``path`` unless it is already there."""
    model_path = Path(path)
    if model_path.exists():
        return model_path

    logger.info("Downloading hand landmarker model from %s", url)
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise TrackerInitError(f"Failed to download vision model: {e}") from e

    try:
        model_path.parent.mkdir(parents=True, exist_ok=True)
        model_path.write_bytes(response.content)
    except OSError as e:
        raise TrackerInitError(f"Failed to save vision model to {model_path}: {e}") from e
    return model_path


class HandsTracker:
    """Index fingertip tracker for a single hand in a video stream."""

    def __init__(self, cfg: MediaPipeConfig):
        """
        Load the landmarker model.

        Args:
            cfg: MediaPipe settings (model location and confidences)

        Raises:
            TrackerInitError: if the model cannot be fetched or loaded
        """
        model_path = ensure_model(cfg.model_path, cfg.model_url)
        options = vision.HandLandmarkerOptions(
            base_options=mp_tasks.BaseOptions(model_asset_path=str(model_path)),
            running_mode=vision.RunningMode.VIDEO,
            num_hands=cfg.num_hands,
            min_hand_detection_confidence=cfg.min_detection_confidence,
            min_hand_presence_confidence=cfg.min_presence_confidence,
            min_tracking_confidence=cfg.min_tracking_confidence
        )
        try:
            self.landmarker = vision.HandLandmarker.create_from_options(options)
        except (RuntimeError, ValueError) as e:
            raise TrackerInitError(f"Failed to load vision models: {e}") from e
        logger.info("Hand landmarker ready (%s)", model_path)

    def process(self, frame_bgr: np.ndarray, timestamp_ms: int) -> Optional[List[Tuple[float, float]]]:
        """
        Process a frame and return the first hand's landmarks.

        Args:
            frame_bgr: Input frame in BGR format
            timestamp_ms: Frame timestamp, strictly increasing across calls

        Returns:
            List of 21 (x, y) coordinates in [0..1] range, or None if no hand detected
        """
        frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        image = mp.Image(image_format=mp.ImageFormat.SRGB, data=frame_rgb)
        result = self.landmarker.detect_for_video(image, int(timestamp_ms))

        if result.hand_landmarks:
            return [(lm.x, lm.y) for lm in result.hand_landmarks[0]]
        return None

    def detect(self, frame: np.ndarray, timestamp_ms: int) -> Optional[Tuple[float, float]]:
        """Normalized index fingertip for this frame, or None."""
        landmarks = self.process(frame, timestamp_ms)
        if landmarks is None:
            return None
        return fingertip(landmarks)

    def close(self) -> None:
        self.landmarker.close()
