"""
Render emitter: turns game state into an ordered list of draw primitives.

Nothing here touches a drawing backend or mutates game state; backends such
as ``pygame_renderer.PygameRenderer`` execute the primitives.
"""
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

from .config import GameplayConfig
from .types import Color, Food, GamePhase, Point


WHITE: Color = (255, 255, 255)
BLACK: Color = (0, 0, 0)
SLATE: Color = (30, 41, 59)
SNAKE_HEAD_GREEN: Color = (74, 222, 128)
SNAKE_TAIL_GREEN: Color = (5, 150, 105)

HINT_TEXT = "Show your index finger to start!"
PAUSED_TEXT = "Camera Paused"
EYE_OFFSET = 4
EYE_RADIUS = 3
FOOD_GLOW = 15


@dataclass(frozen=True)
class Clear:
    """Wipe the canvas. ``fill`` None means let the camera feed show through."""
    fill: Optional[Color] = None


@dataclass(frozen=True)
class Circle:
    """Filled disc with optional outline and soft glow."""
    center: Point
    radius: float
    fill: Color
    outline: Optional[Color] = None
    outline_width: int = 0
    glow: Optional[Color] = None
    glow_radius: float = 0.0


@dataclass(frozen=True)
class Stroke:
    """Round-capped connected path with a linear gradient from first to last point."""
    points: Tuple[Point, ...]
    width: float
    start_color: Color
    end_color: Color


@dataclass(frozen=True)
class Text:
    """Centered text label."""
    text: str
    position: Point
    size: int
    color: Color
    alpha: int = 255


DrawCommand = Union[Clear, Circle, Stroke, Text]


@dataclass(frozen=True)
class SceneState:
    """Read-only snapshot of everything the emitter needs for one frame."""
    phase: GamePhase
    trail: Tuple[Point, ...]
    food: Optional[Food]
    live_tip: Optional[Point]
    score: int
    canvas_size: Tuple[int, int]


def effective_head(trail: Sequence[Point], live_tip: Optional[Point]) -> Optional[Point]:
    """The live fingertip if present, else the newest committed node."""
    if live_tip is not None:
        return live_tip
    return trail[0] if trail else None


def render_scene(state: SceneState, cfg: GameplayConfig) -> List[DrawCommand]:
    """Build the draw list for a playing or frozen game-over frame."""
    width, height = state.canvas_size
    commands: List[DrawCommand] = [Clear()]

    food = state.food
    if food is not None:
        commands.append(Circle(
            center=food.position,
            radius=cfg.food_radius,
            fill=food.color.rgb,
            outline=WHITE,
            outline_width=2,
            glow=food.color.rgb,
            glow_radius=cfg.food_radius + FOOD_GLOW
        ))

    trail = state.trail
    if trail:
        points = trail if state.live_tip is None else (state.live_tip,) + trail
        commands.append(Stroke(
            points=points,
            width=cfg.snake_radius * 2,
            start_color=SNAKE_HEAD_GREEN,
            end_color=SNAKE_TAIL_GREEN
        ))

        head = effective_head(trail, state.live_tip)
        commands.append(Circle(center=head, radius=cfg.snake_radius, fill=WHITE))
        commands.append(Circle(center=Point(head.x - EYE_OFFSET, head.y - EYE_OFFSET),
                               radius=EYE_RADIUS, fill=BLACK))
        commands.append(Circle(center=Point(head.x + EYE_OFFSET, head.y - EYE_OFFSET),
                               radius=EYE_RADIUS, fill=BLACK))
    elif state.phase is GamePhase.PLAYING:
        commands.append(Text(HINT_TEXT, Point(width / 2, height / 2), 20, WHITE, alpha=178))

    commands.append(Text(f"Score: {state.score}", Point(70, 24), 24, WHITE))
    return commands


def render_paused(canvas_size: Tuple[int, int]) -> List[DrawCommand]:
    """Placeholder shown while the camera is toggled off."""
    width, height = canvas_size
    return [Clear(fill=SLATE), Text(PAUSED_TEXT, Point(width / 2, height / 2), 30, WHITE)]
