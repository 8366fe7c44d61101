"""
Test cases for the game loop controller's state machine and per-frame tick.
"""
import random
import sys
import unittest
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from finger_snake.config import load_config
from finger_snake.frame_clock import ManualFrameClock
from finger_snake.game import CAMERA_DENIED_MESSAGE, GameLoopController, load_tracker
from finger_snake.render import HINT_TEXT, PAUSED_TEXT, Text
from finger_snake.tracker_mock import MockFrameSource, MockTracker
from finger_snake.trail import TrailManager
from finger_snake.types import Food, FoodColor, GamePhase, Point

WIDTH, HEIGHT = 640, 480
FAR_FOOD = Food(x=600.0, y=440.0, color=FoodColor.EMERALD)


def norm(x: float, y: float):
    """Pixel position to normalized tracker output."""
    return (x / WIDTH, y / HEIGHT)


class RecordingRenderer:
    """Renderer that keeps every draw list it receives."""

    def __init__(self):
        self.frames = []

    def draw(self, commands):
        self.frames.append(list(commands))

    def texts(self, index: int = -1):
        return [c.text for c in self.frames[index] if isinstance(c, Text)]


class RaisingTracker(MockTracker):
    def detect(self, frame, timestamp_ms):
        raise RuntimeError("graph crashed")


class FlakyFrameSource(MockFrameSource):
    """Frame source whose first read fails."""

    def __init__(self):
        super().__init__()
        self.failed = False

    def read(self):
        if not self.failed:
            self.failed = True
            raise RuntimeError("camera stalled")
        return super().read()


class GameTestCase(unittest.TestCase):
    """Shared fixture: controller wired to mocks and a manual clock."""

    def setUp(self):
        """Set up test configuration and collaborators."""
        self.cfg = load_config()
        self.tracker = MockTracker()
        self.source = MockFrameSource()
        self.renderer = RecordingRenderer()
        self.clock = ManualFrameClock()
        self.scores = []
        self.phases = []
        self.vibrations = []
        self.controller = GameLoopController(
            self.cfg,
            frame_source=self.source,
            renderer=self.renderer,
            clock=self.clock,
            canvas_size=lambda: (WIDTH, HEIGHT),
            score_observer=self.scores.append,
            phase_observer=self.phases.append,
            haptics=self.vibrations.append,
            rng=random.Random(0)
        )

    def start(self, food=FAR_FOOD):
        self.controller.tracker_ready(self.tracker)
        self.assertTrue(self.controller.start_game())
        self.controller.session.food = food


class TestPhases(GameTestCase):
    """Test phase transitions."""

    def test_starts_loading_without_ticks(self):
        """Nothing is scheduled or drawn while the model loads."""
        self.assertIs(self.controller.phase, GamePhase.LOADING)
        self.controller.tick()

        self.assertEqual(self.clock.pending, 0)
        self.assertEqual(self.renderer.frames, [])

    def test_tracker_ready_opens_menu(self):
        """A loaded tracker moves Loading -> Menu."""
        self.controller.tracker_ready(self.tracker)

        self.assertIs(self.controller.phase, GamePhase.MENU)
        self.assertEqual(self.phases, [GamePhase.MENU])
        self.assertIsNone(self.controller.status_message)

    def test_tracker_failure_is_terminal(self):
        """A failed load keeps Loading with a message and blocks starting."""
        self.controller.tracker_failed("Failed to load vision models. Please reload.")

        self.assertIs(self.controller.phase, GamePhase.LOADING)
        self.assertIn("Please reload", self.controller.status_message)
        self.assertFalse(self.controller.start_game())
        self.assertEqual(self.phases, [])

    def test_start_game(self):
        """Menu -> Playing resets the score, spawns food and schedules a frame."""
        self.controller.tracker_ready(self.tracker)
        self.assertTrue(self.controller.start_game())

        self.assertIs(self.controller.phase, GamePhase.PLAYING)
        self.assertTrue(self.source.opened)
        self.assertEqual(self.scores, [0])
        self.assertEqual(self.controller.trail, ())
        food = self.controller.food
        self.assertIsNotNone(food)
        self.assertTrue(60 <= food.x <= WIDTH - 60)
        self.assertTrue(60 <= food.y <= HEIGHT - 60)
        self.assertEqual(self.clock.pending, 1)

    def test_camera_failure_stays_in_menu(self):
        """A denied camera aborts the start and explains why."""
        self.source.fail_open = True
        self.controller.tracker_ready(self.tracker)

        self.assertFalse(self.controller.start_game())
        self.assertIs(self.controller.phase, GamePhase.MENU)
        self.assertEqual(self.controller.status_message, CAMERA_DENIED_MESSAGE)
        self.assertEqual(self.clock.pending, 0)

    def test_cannot_restart_from_menu(self):
        """Restart only applies to a running game."""
        self.controller.tracker_ready(self.tracker)

        self.assertFalse(self.controller.restart())
        self.assertIs(self.controller.phase, GamePhase.MENU)


class TestTick(GameTestCase):
    """Test one frame of game logic."""

    def test_first_tip_bootstraps_trail(self):
        """The first detected fingertip becomes the trail's only node."""
        self.start()
        self.tracker.push(norm(320, 240))

        self.clock.advance()

        self.assertEqual(self.controller.trail, (Point(320, 240),))
        self.assertEqual(self.controller.live_tip, Point(320, 240))
        self.assertEqual(len(self.renderer.frames), 1)

    def test_no_hand_shows_hint(self):
        """Without a hand the trail stays empty and the hint is drawn."""
        self.start()
        self.tracker.push(None)

        self.clock.advance()

        self.assertEqual(self.controller.trail, ())
        self.assertIsNone(self.controller.live_tip)
        self.assertIn(HINT_TEXT, self.renderer.texts())

    def test_unchanged_frame_reuses_detection(self):
        """A repeated camera timestamp skips detection and keeps the last tip."""
        self.start()
        self.tracker.push(norm(100, 100), norm(400, 400))
        self.clock.advance()
        self.source.hold = True

        self.clock.advance()
        self.clock.advance()

        self.assertEqual(len(self.tracker.calls), 1)
        self.assertEqual(self.controller.live_tip, Point(100, 100))
        self.assertEqual(len(self.controller.trail), 1)

    def test_eating_food(self):
        """A tip 11px from the food scores, notifies and respawns the food."""
        food = Food(x=200.0, y=200.0, color=FoodColor.RED)
        self.start(food=food)
        self.tracker.push(norm(210, 205))

        self.clock.advance()

        self.assertEqual(self.controller.score, 1)
        self.assertEqual(self.scores, [0, 1])
        self.assertEqual(self.vibrations, [50])
        new_food = self.controller.food
        self.assertIsNot(new_food, food)
        self.assertTrue(60 <= new_food.x <= WIDTH - 60)
        self.assertTrue(60 <= new_food.y <= HEIGHT - 60)

    def test_self_collision_ends_game(self):
        """Touching node 13 of a long trail moves Playing -> GameOver."""
        self.start()
        nodes = [Point(100 + i * 20, 100) for i in range(20)]
        self.controller.session.trail = TrailManager(self.cfg.gameplay, nodes=nodes, score=5)
        self.tracker.push(norm(nodes[13].x + 2, 100))

        self.clock.advance()

        self.assertIs(self.controller.phase, GamePhase.GAME_OVER)
        self.assertEqual(self.phases[-1], GamePhase.GAME_OVER)
        self.assertEqual(self.vibrations, [200])
        self.assertEqual(self.controller.score, 5)

    def test_game_over_freezes_scene(self):
        """After game over frames keep rendering but nothing moves."""
        self.test_self_collision_ends_game()
        trail = self.controller.trail
        calls = len(self.tracker.calls)
        frames = len(self.renderer.frames)
        self.tracker.push(norm(500, 400), norm(520, 400))

        for _ in range(5):
            self.clock.advance()

        self.assertEqual(self.controller.trail, trail)
        self.assertEqual(len(self.tracker.calls), calls)
        self.assertEqual(len(self.renderer.frames), frames + 5)
        self.assertEqual(self.clock.pending, 1)

    def test_restart_after_game_over(self):
        """Restart goes straight back to Playing with a fresh game."""
        self.test_self_collision_ends_game()

        self.assertTrue(self.controller.restart())

        self.assertIs(self.controller.phase, GamePhase.PLAYING)
        self.assertEqual(self.controller.score, 0)
        self.assertEqual(self.controller.trail, ())
        self.assertEqual(self.scores[-1], 0)
        self.assertEqual(self.clock.pending, 1)

    def test_paused_camera_skips_logic(self):
        """While the camera is paused only the placeholder is drawn."""
        self.start()
        self.tracker.push(norm(300, 300))

        self.assertTrue(self.controller.toggle_camera())
        self.clock.advance()

        self.assertEqual(self.tracker.calls, [])
        self.assertEqual(self.controller.trail, ())
        self.assertIn(PAUSED_TEXT, self.renderer.texts())

        self.assertFalse(self.controller.toggle_camera())
        self.clock.advance()
        self.assertEqual(len(self.controller.trail), 1)

    def test_detection_error_is_a_miss(self):
        """An exception from the tracker never aborts the loop."""
        self.tracker = RaisingTracker()
        self.start()

        self.clock.advance()
        self.clock.advance()

        self.assertIs(self.controller.phase, GamePhase.PLAYING)
        self.assertIsNone(self.controller.live_tip)
        self.assertEqual(self.clock.pending, 1)

    def test_failed_frame_keeps_loop_alive(self):
        """A tick that raises is logged and the next frame is still requested."""
        self.source = self.controller.frame_source = FlakyFrameSource()
        self.start()
        self.tracker.push(norm(320, 240))

        with self.assertLogs("finger_snake.game", level="ERROR"):
            self.clock.advance()

        self.assertIs(self.controller.phase, GamePhase.PLAYING)
        self.assertEqual(self.clock.pending, 1)
        self.assertTrue(self.controller.frame_pending)

        self.clock.advance()
        self.assertEqual(self.controller.trail, (Point(320, 240),))


class TestScheduling(GameTestCase):
    """Test frame request lifecycle."""

    def test_one_request_at_a_time(self):
        """Restarting a running game does not stack frame requests."""
        self.start()
        self.controller.restart()
        self.controller.restart()

        self.assertEqual(self.clock.pending, 1)
        self.assertEqual(self.clock.advance(), 1)
        self.assertEqual(len(self.renderer.frames), 1)

    def test_stop_deregisters_frame(self):
        """stop() leaves nothing scheduled."""
        self.start()
        self.controller.stop()

        self.assertEqual(self.clock.pending, 0)
        self.assertEqual(self.clock.advance(), 0)
        self.assertFalse(self.controller.frame_pending)

    def test_close_tears_down(self):
        """close() cancels the frame, closes the tracker and blocks rescheduling."""
        self.start()
        self.controller.close()

        self.assertEqual(self.clock.pending, 0)
        self.assertTrue(self.tracker.closed)
        self.controller.restart()
        self.assertEqual(self.clock.pending, 0)


class TestLoadTracker(unittest.IsolatedAsyncioTestCase):
    """Test bringing up the tracker off the event loop."""

    def setUp(self):
        self.controller = GameLoopController(
            load_config(),
            frame_source=MockFrameSource(),
            renderer=RecordingRenderer(),
            clock=ManualFrameClock(),
            canvas_size=lambda: (WIDTH, HEIGHT)
        )

    async def test_loaded_tracker_opens_menu(self):
        """A tracker built by the factory moves Loading -> Menu."""
        tracker = MockTracker()

        result = await load_tracker(self.controller, lambda: tracker)

        self.assertIs(result, tracker)
        self.assertIs(self.controller.phase, GamePhase.MENU)
        self.assertIs(self.controller.tracker, tracker)

    async def test_factory_error_reported_as_failure(self):
        """Errors other than TrackerInitError, such as a missing backend, still fail the load."""
        def factory(cfg):
            raise ImportError("No module named 'mediapipe'")

        with self.assertLogs("finger_snake.game", level="ERROR"):
            result = await load_tracker(self.controller, factory, None)

        self.assertIsNone(result)
        self.assertIs(self.controller.phase, GamePhase.LOADING)
        self.assertIn("mediapipe", self.controller.status_message)
        self.assertIn("Please reload", self.controller.status_message)
        self.assertFalse(self.controller.start_game())

    async def test_tracker_closed_if_controller_closed(self):
        """A tracker finishing after shutdown is closed, not installed."""
        tracker = MockTracker()
        self.controller.close()

        result = await load_tracker(self.controller, lambda: tracker)

        self.assertIsNone(result)
        self.assertTrue(tracker.closed)
        self.assertIs(self.controller.phase, GamePhase.LOADING)


if __name__ == '__main__':
    unittest.main()
