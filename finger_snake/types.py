"""
Type definitions for the finger snake game core.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Protocol, Sequence, Tuple, runtime_checkable


Color = Tuple[int, int, int]


@dataclass(frozen=True)
class Point:
    """A 2-D coordinate in canvas pixel space."""
    x: float
    y: float


class FoodColor(Enum):
    """Fixed palette a food target is painted with."""
    RED = (239, 68, 68)
    AMBER = (245, 158, 11)
    EMERALD = (16, 185, 129)
    BLUE = (59, 130, 246)
    VIOLET = (139, 92, 246)
    PINK = (236, 72, 153)

    @property
    def rgb(self) -> Color:
        return self.value


@dataclass(frozen=True)
class Food:
    """The single target the snake is chasing."""
    x: float
    y: float
    color: FoodColor

    @property
    def position(self) -> Point:
        return Point(self.x, self.y)


class GamePhase(Enum):
    """Phases of a game session."""
    LOADING = "Loading"
    MENU = "Menu"
    PLAYING = "Playing"
    GAME_OVER = "GameOver"


@dataclass(frozen=True)
class CapturedFrame:
    """A camera image together with its capture timestamp in milliseconds."""
    image: Any
    timestamp_ms: int


@runtime_checkable
class TrackerProto(Protocol):
    """Hand landmark detector yielding at most one normalized fingertip."""

    def detect(self, frame: Any, timestamp_ms: int) -> Optional[Tuple[float, float]]:
        """Return the normalized (x, y) fingertip in [0, 1], or None if no hand."""
        ...

    def close(self) -> None:
        ...


@runtime_checkable
class FrameSourceProto(Protocol):
    """Supplies camera frames to the game loop."""

    @property
    def paused(self) -> bool:
        ...

    def open(self) -> None:
        """Start capturing. Raises CameraUnavailableError on failure."""
        ...

    def read(self) -> Optional[CapturedFrame]:
        ...

    def toggle_pause(self) -> bool:
        ...

    def release(self) -> None:
        ...


@runtime_checkable
class RendererProto(Protocol):
    """Drawing backend that consumes draw primitives."""

    def draw(self, commands: Sequence[Any]) -> None:
        ...


FrameCallback = Callable[[float], None]


@runtime_checkable
class FrameClockProto(Protocol):
    """Host "next frame" primitive the game loop reschedules itself on."""

    def request_frame(self, callback: FrameCallback) -> int:
        ...

    def cancel_frame(self, handle: int) -> None:
        ...
