"""
Finger Snake

Real-time core of a camera-controlled snake game: a tracked index fingertip
lays down a growing trail that must reach food without touching itself.
"""

__version__ = "0.1.0"
__author__ = "Finger Snake Team"

from .types import Point, Food, FoodColor, GamePhase, CapturedFrame, TrackerProto, FrameSourceProto, RendererProto, FrameClockProto
from .config import load_config, Cfg, GameplayConfig
from .errors import SetupError, TrackerInitError, CameraUnavailableError
from .geometry import distance
from .food import FoodSpawner
from .trail import TrailManager
from .collision import CollisionEngine, check_self_collision, check_food_collision
from .frame_clock import ManualFrameClock, AsyncioFrameClock
from .game import GameLoopController, GameSession
from .render import render_scene, render_paused, SceneState
from .tracker_mock import MockTracker, MockFrameSource

__all__ = [
    "Point",
    "Food",
    "FoodColor",
    "GamePhase",
    "CapturedFrame",
    "TrackerProto",
    "FrameSourceProto",
    "RendererProto",
    "FrameClockProto",
    "load_config",
    "Cfg",
    "GameplayConfig",
    "SetupError",
    "TrackerInitError",
    "CameraUnavailableError",
    "distance",
    "FoodSpawner",
    "TrailManager",
    "CollisionEngine",
    "check_self_collision",
    "check_food_collision",
    "ManualFrameClock",
    "AsyncioFrameClock",
    "GameLoopController",
    "GameSession",
    "render_scene",
    "render_paused",
    "SceneState",
    "MockTracker",
    "MockFrameSource",
]
