"""
Config loader for Brainrot.
Loads YAML configuration with dataclass validation.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import yaml


@dataclass
class ThresholdConfig:
    """Expression thresholds, unitless ratios in normalized landmark space."""
    eye_opening: float = 0.03       # Shock
    mouth_open: float = 0.025       # Tongue / mouth open
    squinting: float = 0.018        # Glare
    smile: float = 0.012
    brow_raise: float = 0.01
    wink_ratio: float = 0.6         # Eye asymmetry ratio
    pucker_ratio: float = 0.25      # Kissy
    sleepy_threshold: float = 0.018


@dataclass
class TransitionConfig:
    hold_time: float = 300          # ms a candidate must persist before switching
    debounce: float = 500           # ms between two switches
    crossfade_duration: int = 300   # ms, display only
    history_length: int = 10        # Majority vote window (frames)


@dataclass
class GestureConfig:
    extension_margin: float = 0.02      # Tip must be this far above the PIP joint
    thumb_vertical_margin: float = 0.1  # Thumb tip vs wrist for up/down
    thumb_spread_ratio: float = 1.2     # Thumb tip vs MCP distance from palm center
    ok_touch_distance: float = 0.05     # Thumb tip to index tip
    confidence_floor: float = 0.5       # Gesture overrides expression above this


@dataclass
class DetectionConfig:
    min_face_landmarks: int = 478   # Face mesh incl. iris refinement
    min_hand_landmarks: int = 21
    target_fps: int = 30


@dataclass
class CameraConfig:
    device_id: int = 0
    width: int = 1280
    height: int = 720
    fps: int = 30
    mirror: bool = True


@dataclass
class MediaPipeConfig:
    face_model: str = "models/face_landmarker.task"
    hand_model: str = "models/hand_landmarker.task"
    num_faces: int = 1
    num_hands: int = 2
    min_detection_confidence: float = 0.5
    min_presence_confidence: float = 0.5
    min_tracking_confidence: float = 0.5


@dataclass
class MemeConfig:
    assets_dir: str = "assets"
    recent_size: int = 3
    default_category: str = "neutral"


@dataclass
class UIConfig:
    show_camera: bool = True
    window_title: str = "Brainrot"


@dataclass
class Config:
    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)
    transitions: TransitionConfig = field(default_factory=TransitionConfig)
    gestures: GestureConfig = field(default_factory=GestureConfig)
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    camera: CameraConfig = field(default_factory=CameraConfig)
    mediapipe: MediaPipeConfig = field(default_factory=MediaPipeConfig)
    memes: MemeConfig = field(default_factory=MemeConfig)
    ui: UIConfig = field(default_factory=UIConfig)


def _dict_to_dataclass(cls, data: Optional[dict]):
    """Convert a dict to a dataclass, ignoring unknown keys."""
    if data is None:
        return cls()
    field_names = {f.name for f in cls.__dataclass_fields__.values()}
    filtered = {k: v for k, v in data.items() if k in field_names}
    return cls(**filtered)


def load_config(config_path: Optional[Path] = None) -> Config:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config file. If None, uses config.yaml
                    in project root.

    Returns:
        Config dataclass with all settings.
    """
    if config_path is None:
        config_path = Path(__file__).parent.parent.parent / "config.yaml"

    config_path = Path(config_path)

    if not config_path.exists():
        return Config()

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f) or {}

    return Config(
        thresholds=_dict_to_dataclass(ThresholdConfig, data.get('thresholds')),
        transitions=_dict_to_dataclass(TransitionConfig, data.get('transitions')),
        gestures=_dict_to_dataclass(GestureConfig, data.get('gestures')),
        detection=_dict_to_dataclass(DetectionConfig, data.get('detection')),
        camera=_dict_to_dataclass(CameraConfig, data.get('camera')),
        mediapipe=_dict_to_dataclass(MediaPipeConfig, data.get('mediapipe')),
        memes=_dict_to_dataclass(MemeConfig, data.get('memes')),
        ui=_dict_to_dataclass(UIConfig, data.get('ui')),
    )
