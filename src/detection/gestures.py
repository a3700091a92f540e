"""
Gesture recognition from hand landmarks.
Detects middle finger, thumbs up/down, peace, OK, rock on, pointing,
wave (open palm) and fist.
"""
from typing import Callable, Optional, Sequence, Tuple

from .categories import Classification, Gesture
from .config import DetectionConfig, GestureConfig, TransitionConfig
from .features import HandFeatures
from .landmarks import is_well_formed
from .stabilizer import TemporalStabilizer

GestureRule = Callable[[HandFeatures, GestureConfig], Optional[float]]


def detect_middle_finger(h: HandFeatures, config: GestureConfig) -> Optional[float]:
    """Only the middle finger extended."""
    f = h.fingers
    if f.middle and not f.index and not f.ring and not f.pinky and not f.thumb:
        return 0.9
    return None


def detect_thumbs_up(h: HandFeatures, config: GestureConfig) -> Optional[float]:
    """Thumb above the wrist, other fingers curled."""
    f = h.fingers
    if h.thumb_up and not f.index and not f.middle and not f.ring and not f.pinky:
        return 0.9
    return None


def detect_thumbs_down(h: HandFeatures, config: GestureConfig) -> Optional[float]:
    f = h.fingers
    if h.thumb_down and not f.index and not f.middle and not f.ring and not f.pinky:
        return 0.9
    return None


def detect_peace(h: HandFeatures, config: GestureConfig) -> Optional[float]:
    """Index and middle extended, ring and pinky curled."""
    f = h.fingers
    if f.index and f.middle and not f.ring and not f.pinky:
        return 0.85
    return None


def detect_ok(h: HandFeatures, config: GestureConfig) -> Optional[float]:
    """Thumb and index tips touching, the other three fingers extended."""
    f = h.fingers
    if h.thumb_index_distance is None:
        return None
    if h.thumb_index_distance < config.ok_touch_distance and f.middle and f.ring and f.pinky:
        return 0.85
    return None


def detect_rock_on(h: HandFeatures, config: GestureConfig) -> Optional[float]:
    """Index and pinky extended, middle and ring curled."""
    f = h.fingers
    if f.index and f.pinky and not f.middle and not f.ring:
        return 0.85
    return None


def detect_pointing(h: HandFeatures, config: GestureConfig) -> Optional[float]:
    f = h.fingers
    if f.index and not f.middle and not f.ring and not f.pinky:
        return 0.85
    return None


def detect_wave(h: HandFeatures, config: GestureConfig) -> Optional[float]:
    """Open palm, all five digits extended."""
    if all(h.fingers):
        return 0.8
    return None


def detect_fist(h: HandFeatures, config: GestureConfig) -> Optional[float]:
    if not any(h.fingers):
        return 0.8
    return None


# Priority order: middle finger before peace before generic pointing
GESTURE_RULES: Tuple[Tuple[Gesture, GestureRule], ...] = (
    (Gesture.MIDDLE_FINGER, detect_middle_finger),
    (Gesture.THUMBS_UP, detect_thumbs_up),
    (Gesture.THUMBS_DOWN, detect_thumbs_down),
    (Gesture.PEACE, detect_peace),
    (Gesture.OK, detect_ok),
    (Gesture.ROCK_ON, detect_rock_on),
    (Gesture.POINTING, detect_pointing),
    (Gesture.WAVE, detect_wave),
    (Gesture.FIST, detect_fist),
)


class GestureClassifier:
    """
    Classifies a single hand per frame.

    Rules are evaluated in ``GESTURE_RULES`` order; the first match wins.
    """

    def __init__(
        self,
        config: Optional[GestureConfig] = None,
        min_landmarks: int = DetectionConfig.min_hand_landmarks,
        rules: Sequence[Tuple[Gesture, GestureRule]] = GESTURE_RULES,
    ):
        self._config = config or GestureConfig()
        self._min_landmarks = min_landmarks
        self._rules = tuple(rules)

    @property
    def min_landmarks(self) -> int:
        return self._min_landmarks

    @property
    def rules(self) -> Tuple[Tuple[Gesture, GestureRule], ...]:
        return self._rules

    def classify(self, landmarks: Optional[Sequence]) -> Classification:
        if not is_well_formed(landmarks, self._min_landmarks):
            return Classification(Gesture.NONE, 0.0)

        features = HandFeatures.from_landmarks(landmarks, self._config)
        for gesture, rule in self._rules:
            confidence = rule(features, self._config)
            if confidence is not None:
                return Classification(gesture, confidence)
        return Classification(Gesture.NONE, 0.0)


class GestureDetector:
    """Gesture classifier wrapped in its own temporal stabilizer."""

    def __init__(
        self,
        config: Optional[GestureConfig] = None,
        transitions: Optional[TransitionConfig] = None,
        min_landmarks: int = DetectionConfig.min_hand_landmarks,
    ):
        self.classifier = GestureClassifier(config, min_landmarks)
        self.stabilizer = TemporalStabilizer(Gesture.NONE, transitions)

    @property
    def current(self) -> Gesture:
        return self.stabilizer.current

    @property
    def pending(self) -> Optional[Gesture]:
        return self.stabilizer.pending

    @property
    def history(self) -> list:
        return self.stabilizer.history

    def analyze(self, landmarks: Optional[Sequence], now: Optional[float] = None) -> Classification:
        if not is_well_formed(landmarks, self.classifier.min_landmarks):
            return Classification(Gesture.NONE, 0.0)
        raw = self.classifier.classify(landmarks)
        return self.stabilizer.update(raw, now)

    def reset(self) -> None:
        self.stabilizer.reset()
