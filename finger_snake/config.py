"""
Configuration management for the finger snake game.
"""
import os
import yaml
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass


CONFIG_ENV_VAR = "FINGER_SNAKE_CONFIG"
DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.default.yaml"


@dataclass
class CameraConfig:
    """Camera configuration settings."""
    index: int
    width: int
    height: int
    fps: int
    mirror: bool


@dataclass
class MediaPipeConfig:
    """MediaPipe HandLandmarker configuration settings."""
    model_path: str
    model_url: str
    num_hands: int
    min_detection_confidence: float
    min_presence_confidence: float
    min_tracking_confidence: float


@dataclass
class GameplayConfig:
    """Trail, collision and food tuning."""
    initial_length: int
    growth_per_food: int
    min_node_distance: float
    grace_nodes: int
    snake_radius: float
    collision_threshold: float
    food_radius: float
    spawn_padding: float

    def target_length(self, score: int) -> int:
        """Number of trail nodes allowed at the given score."""
        return self.initial_length + score * self.growth_per_food


@dataclass
class DisplayConfig:
    """Display configuration settings."""
    window_name: str
    fps: int
    show_fps: bool


@dataclass
class LoggingConfig:
    """Logging configuration settings."""
    level: str


@dataclass
class Cfg:
    """Main configuration class."""
    camera: CameraConfig
    mediapipe: MediaPipeConfig
    gameplay: GameplayConfig
    display: DisplayConfig
    logging: LoggingConfig


def load_config(path: Optional[str] = None) -> Cfg:
    """
    Load configuration from YAML file.

    Args:
        path: Path to config file. If None, the FINGER_SNAKE_CONFIG
            environment variable is consulted, then the packaged default.

    Returns:
        Configuration object with all settings
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f)

    return _dict_to_config(data)


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    try:
        return data[name]
    except (KeyError, TypeError):
        raise KeyError(f"Config section missing: {name}") from None


def _dict_to_config(data: Dict[str, Any]) -> Cfg:
    """Convert dictionary to configuration object."""
    camera_data = _section(data, 'camera')
    camera = CameraConfig(
        index=camera_data['index'],
        width=camera_data['width'],
        height=camera_data['height'],
        fps=camera_data['fps'],
        mirror=camera_data.get('mirror', True)
    )

    mp_data = _section(data, 'mediapipe')
    mediapipe = MediaPipeConfig(
        model_path=mp_data['model_path'],
        model_url=mp_data['model_url'],
        num_hands=mp_data['num_hands'],
        min_detection_confidence=mp_data['min_detection_confidence'],
        min_presence_confidence=mp_data['min_presence_confidence'],
        min_tracking_confidence=mp_data['min_tracking_confidence']
    )

    play_data = _section(data, 'gameplay')
    gameplay = GameplayConfig(
        initial_length=play_data['initial_length'],
        growth_per_food=play_data['growth_per_food'],
        min_node_distance=play_data['min_node_distance'],
        grace_nodes=play_data['grace_nodes'],
        snake_radius=play_data['snake_radius'],
        collision_threshold=play_data['collision_threshold'],
        food_radius=play_data['food_radius'],
        spawn_padding=play_data['spawn_padding']
    )

    display_data = _section(data, 'display')
    display = DisplayConfig(
        window_name=display_data['window_name'],
        fps=display_data['fps'],
        show_fps=display_data.get('show_fps', False)
    )

    logging_data = data.get('logging') or {}
    log_cfg = LoggingConfig(level=str(logging_data.get('level', 'INFO')).upper())

    return Cfg(
        camera=camera,
        mediapipe=mediapipe,
        gameplay=gameplay,
        display=display,
        logging=log_cfg
    )
