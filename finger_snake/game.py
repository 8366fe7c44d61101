"""
Game loop controller: the phase state machine and the per-frame tick.
"""
import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple

from .collision import CollisionEngine
from .config import Cfg
from .errors import CameraUnavailableError
from .food import FoodSpawner
from .geometry import scale_normalized
from .render import SceneState, render_paused, render_scene
from .trail import TrailManager
from .types import (
    Food,
    FrameClockProto,
    FrameSourceProto,
    GamePhase,
    Point,
    RendererProto,
    TrackerProto,
)

logger = logging.getLogger(__name__)

RUNNING_PHASES = (GamePhase.PLAYING, GamePhase.GAME_OVER)
LOADING_MESSAGE = "Initializing Vision Engine..."
CAMERA_DENIED_MESSAGE = "Camera access denied or not available."
DEATH_VIBRATION_MS = 200
EAT_VIBRATION_MS = 50


@dataclass
class GameSession:
    """Mutable state of one game, owned by a single controller."""
    trail: TrailManager
    food: Optional[Food] = None
    live_tip: Optional[Point] = None
    last_frame_ms: Optional[int] = None

    @property
    def score(self) -> int:
        return self.trail.score


class GameLoopController:
    """
    Runs the game one frame at a time.

    Phases move Loading -> Menu -> Playing -> GameOver, and GameOver back to
    Playing on restart. While Playing or GameOver the controller keeps exactly
    one frame request registered with its clock; every other phase leaves the
    clock idle. GameOver keeps rendering the frozen scene but skips all game
    logic.
    """

    def __init__(self, cfg: Cfg, frame_source: FrameSourceProto, renderer: RendererProto,
                 clock: FrameClockProto, tracker: Optional[TrackerProto] = None,
                 canvas_size: Optional[Callable[[], Tuple[int, int]]] = None,
                 score_observer: Optional[Callable[[int], None]] = None,
                 phase_observer: Optional[Callable[[GamePhase], None]] = None,
                 haptics: Optional[Callable[[int], None]] = None,
                 rng: Optional[random.Random] = None):
        self.cfg = cfg
        self.gameplay = cfg.gameplay
        self.frame_source = frame_source
        self.renderer = renderer
        self.clock = clock
        self.tracker = tracker
        self.canvas_size = canvas_size or (lambda: (cfg.camera.width, cfg.camera.height))
        self.score_observer = score_observer
        self.phase_observer = phase_observer
        self.haptics = haptics

        self.spawner = FoodSpawner(cfg.gameplay, rng)
        self.collisions = CollisionEngine(cfg.gameplay)
        self.session = GameSession(trail=TrailManager(cfg.gameplay))

        self._phase = GamePhase.LOADING
        self.status_message: Optional[str] = LOADING_MESSAGE
        self._frame_handle: Optional[int] = None
        self._closed = False

        if tracker is not None:
            self.tracker_ready(tracker)

    # --- State accessors ------------------------------------------------

    @property
    def phase(self) -> GamePhase:
        return self._phase

    @property
    def score(self) -> int:
        return self.session.score

    @property
    def trail(self) -> Tuple[Point, ...]:
        return self.session.trail.nodes

    @property
    def food(self) -> Optional[Food]:
        return self.session.food

    @property
    def live_tip(self) -> Optional[Point]:
        return self.session.live_tip

    @property
    def frame_pending(self) -> bool:
        return self._frame_handle is not None

    @property
    def closed(self) -> bool:
        return self._closed

    def snapshot(self) -> SceneState:
        s = self.session
        return SceneState(
            phase=self._phase,
            trail=s.trail.nodes,
            food=s.food,
            live_tip=s.live_tip,
            score=s.score,
            canvas_size=self.canvas_size()
        )

    # --- Phase transitions ----------------------------------------------

    def _set_phase(self, phase: GamePhase) -> None:
        if phase is self._phase:
            return
        logger.info("Phase %s -> %s", self._phase.value, phase.value)
        self._phase = phase
        if self.phase_observer:
            self.phase_observer(phase)

    def _notify_score(self) -> None:
        if self.score_observer:
            self.score_observer(self.session.score)

    def _vibrate(self, duration_ms: int) -> None:
        if self.haptics:
            self.haptics(duration_ms)

    def tracker_ready(self, tracker: TrackerProto) -> None:
        """Hand tracker finished loading: leave Loading for the menu."""
        if self._phase is not GamePhase.LOADING:
            logger.warning("Tracker reported ready in phase %s, ignoring", self._phase.value)
            return
        self.tracker = tracker
        self.status_message = None
        self._set_phase(GamePhase.MENU)

    def tracker_failed(self, message: str) -> None:
        """Tracker could not be loaded. The session stays in Loading."""
        logger.error("Tracker initialization failed: %s", message)
        self.status_message = message

    def start_game(self) -> bool:
        """
        Menu -> Playing. Opens the camera first; if that fails the controller
        stays in the menu with a status message.

        Returns:
            True if a game was started
        """
        if self._phase is not GamePhase.MENU:
            logger.warning("Cannot start a game from phase %s", self._phase.value)
            return False

        try:
            self.frame_source.open()
        except CameraUnavailableError as e:
            logger.error("Camera unavailable: %s", e)
            self.status_message = CAMERA_DENIED_MESSAGE
            return False

        self.status_message = None
        self._new_game()
        return True

    def restart(self) -> bool:
        """GameOver (or Playing) -> Playing through the same reset path as a start."""
        if self._phase not in RUNNING_PHASES:
            logger.warning("Cannot restart from phase %s", self._phase.value)
            return False
        self._new_game()
        return True

    def _new_game(self) -> None:
        s = self.session
        s.trail.reset()
        s.live_tip = None
        s.food = self.spawner.spawn(*self.canvas_size())
        self._notify_score()
        self._set_phase(GamePhase.PLAYING)
        self._schedule()

    def toggle_camera(self) -> bool:
        """Pause or resume camera input. Returns True if now paused."""
        paused = self.frame_source.toggle_pause()
        logger.info("Camera %s", "paused" if paused else "resumed")
        return paused

    # --- Frame scheduling -----------------------------------------------

    def _schedule(self) -> None:
        if self._closed or self._frame_handle is not None:
            return
        if self._phase in RUNNING_PHASES:
            self._frame_handle = self.clock.request_frame(self._on_frame)

    def _on_frame(self, timestamp_ms: float) -> None:
        self._frame_handle = None
        try:
            self.tick()
        except Exception:
            logger.exception("Frame at %.0f ms failed, skipping", timestamp_ms)
        finally:
            self._schedule()

    def stop(self) -> None:
        """Deregister the pending frame request, if any."""
        if self._frame_handle is not None:
            self.clock.cancel_frame(self._frame_handle)
            self._frame_handle = None

    def close(self) -> None:
        """Tear down: no tick fires after this returns."""
        self.stop()
        self._closed = True
        if self.tracker is not None:
            self.tracker.close()
            self.tracker = None

    # --- Per-frame logic ------------------------------------------------

    def tick(self) -> None:
        """Run one frame: update game logic when Playing, then render."""
        if self._phase not in RUNNING_PHASES:
            return

        if self.frame_source.paused:
            self.renderer.draw(render_paused(self.canvas_size()))
            return

        if self._phase is GamePhase.PLAYING:
            self._update()

        self.renderer.draw(render_scene(self.snapshot(), self.gameplay))

    def _update(self) -> None:
        s = self.session
        s.live_tip = self._read_live_tip()
        s.trail.tick(s.live_tip)

        tip = s.live_tip
        if tip is None:
            return

        if len(s.trail) > self.gameplay.grace_nodes and \
                self.collisions.self_collision(tip, s.trail.nodes):
            logger.info("Self collision at (%.0f, %.0f), final score %d", tip.x, tip.y, s.score)
            self._vibrate(DEATH_VIBRATION_MS)
            self._set_phase(GamePhase.GAME_OVER)
            return

        if self.collisions.food_collision(tip, s.food):
            score = s.trail.add_score()
            logger.debug("Food eaten, score %d", score)
            self._notify_score()
            s.food = self.spawner.spawn(*self.canvas_size())
            self._vibrate(EAT_VIBRATION_MS)

    def _read_live_tip(self) -> Optional[Point]:
        s = self.session
        frame = self.frame_source.read()
        if frame is None:
            return None

        # Same camera frame as last tick: reuse the previous detection.
        if frame.timestamp_ms == s.last_frame_ms:
            return s.live_tip
        s.last_frame_ms = frame.timestamp_ms

        if self.tracker is None:
            return None

        try:
            tip = self.tracker.detect(frame.image, frame.timestamp_ms)
        except Exception as e:
            logger.warning("Hand detection failed for frame %d: %s", frame.timestamp_ms, e)
            return None

        if tip is None:
            return None
        width, height = self.canvas_size()
        return scale_normalized(tip, width, height)


async def load_tracker(controller: GameLoopController, factory: Callable[..., TrackerProto],
                       *args: Any) -> Optional[TrackerProto]:
    """
    Build a tracker in a worker thread and hand it to the controller.

    Any failure, including a missing vision backend, is reported through
    ``tracker_failed`` and leaves the controller in Loading.

    Returns:
        The tracker if the controller accepted it, else None
    """
    try:
        tracker = await asyncio.to_thread(factory, *args)
    except Exception as e:
        logger.debug("Tracker factory raised", exc_info=True)
        controller.tracker_failed(f"{e}. Please reload.")
        return None

    if controller.closed:
        tracker.close()
        return None
    controller.tracker_ready(tracker)
    return tracker
