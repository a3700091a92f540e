"""
Facial expression detection from MediaPipe Face Mesh landmarks.

Every expression is a pure rule ``(FaceFeatures, ThresholdConfig) ->
confidence or None``. Rules are evaluated in the fixed order of
``EXPRESSION_RULES`` and the first match wins; the order is the tie-break
between expressions whose loose thresholds overlap.
"""
from typing import Callable, Optional, Sequence, Tuple

from .categories import Classification, Expression
from .config import DetectionConfig, ThresholdConfig, TransitionConfig
from .features import FaceFeatures
from .landmarks import is_well_formed
from .stabilizer import TemporalStabilizer

ExpressionRule = Callable[[FaceFeatures, ThresholdConfig], Optional[float]]

# Fixed constants of individual rules
KISSY_MAX_MOUTH_WIDTH = 0.08
KISSY_FULL_PUCKER = 0.5
WINK_MIN_OPEN_EYE = 0.015
SUSPICIOUS_MAX_RATIO = 0.8
SLEEPY_MIN_EYE = 0.008
POUT_MIN_PROTRUSION = 0.06
POUT_FULL_PROTRUSION = 0.08
DISGUST_MAX_LIP_NOSE = 0.025
DISGUST_FULL_LIP_NOSE = 0.03
CONFUSED_CONFIDENCE = 0.6


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def _ratio(value: float, threshold: float) -> float:
    if threshold <= 0:
        return 1.0
    return _clamp(value / threshold)


def detect_scream(f: FaceFeatures, t: ThresholdConfig) -> Optional[float]:
    """Wide eyes, very open mouth, raised brows."""
    if (f.eye_opening > t.eye_opening * 0.9
            and f.mouth_open > t.mouth_open * 2.5
            and f.brow_height > t.brow_raise):
        return _clamp((f.mouth_open / (t.mouth_open * 2.5) + f.eye_opening / t.eye_opening) / 2)
    return None


def detect_shock(f: FaceFeatures, t: ThresholdConfig) -> Optional[float]:
    """Wide eyes, raised brows, mouth not screaming."""
    if (f.eye_opening > t.eye_opening
            and f.mouth_open < t.mouth_open * 2
            and f.brow_height > t.brow_raise * 0.8):
        return _ratio(f.eye_opening, t.eye_opening)
    return None


def detect_tongue(f: FaceFeatures, t: ThresholdConfig) -> Optional[float]:
    if f.mouth_open > t.mouth_open and f.eye_opening < t.eye_opening * 1.5:
        return _ratio(f.mouth_open, t.mouth_open)
    return None


def detect_kissy(f: FaceFeatures, t: ThresholdConfig) -> Optional[float]:
    """Tall, narrow mouth."""
    if f.pucker_ratio > t.pucker_ratio and f.mouth_width < KISSY_MAX_MOUTH_WIDTH:
        return _ratio(f.pucker_ratio, KISSY_FULL_PUCKER)
    return None


def detect_happy(f: FaceFeatures, t: ThresholdConfig) -> Optional[float]:
    if f.smile_ratio > t.smile and f.mouth_open < t.mouth_open * 1.5:
        return _ratio(f.smile_ratio, t.smile)
    return None


def detect_wink(f: FaceFeatures, t: ThresholdConfig) -> Optional[float]:
    """One eye much more closed than the other, the other clearly open."""
    if f.eye_ratio < t.wink_ratio and max(f.left_eye, f.right_eye) > WINK_MIN_OPEN_EYE:
        return _clamp(1 - f.eye_ratio)
    return None


def detect_sad(f: FaceFeatures, t: ThresholdConfig) -> Optional[float]:
    """Drooping mouth corners, low brows."""
    if f.smile_ratio < -t.smile * 0.5 and f.brow_height < t.brow_raise * 0.5:
        return _ratio(abs(f.smile_ratio), t.smile)
    return None


def detect_glare(f: FaceFeatures, t: ThresholdConfig) -> Optional[float]:
    """Squinting without a smile."""
    if f.eye_opening < t.squinting and f.smile_ratio < t.smile * 0.5:
        return _clamp(1 - f.eye_opening / t.squinting)
    return None


def detect_suspicious(f: FaceFeatures, t: ThresholdConfig) -> Optional[float]:
    """Mild eye asymmetry, short of a wink."""
    if t.wink_ratio < f.eye_ratio < SUSPICIOUS_MAX_RATIO:
        return _clamp(SUSPICIOUS_MAX_RATIO - f.eye_ratio)
    return None


def detect_sleepy(f: FaceFeatures, t: ThresholdConfig) -> Optional[float]:
    """Drooping but not shut eyes, mouth closed."""
    if (SLEEPY_MIN_EYE < f.eye_opening < t.sleepy_threshold
            and f.mouth_open < t.mouth_open):
        return _clamp(1 - f.eye_opening / t.sleepy_threshold)
    return None


def detect_eyebrow_raise(f: FaceFeatures, t: ThresholdConfig) -> Optional[float]:
    if f.brow_height > t.brow_raise * 1.5 and f.eye_opening < t.eye_opening:
        return _ratio(f.brow_height, t.brow_raise * 1.5)
    return None


def detect_pout(f: FaceFeatures, t: ThresholdConfig) -> Optional[float]:
    if f.lip_protrusion is None:
        return None
    if f.lip_protrusion > POUT_MIN_PROTRUSION and f.mouth_open < t.mouth_open * 0.8:
        return _ratio(f.lip_protrusion, POUT_FULL_PROTRUSION)
    return None


def detect_disgust(f: FaceFeatures, t: ThresholdConfig) -> Optional[float]:
    """Upper lip pulled toward the nose, narrowed eyes."""
    if f.lip_nose_distance is None:
        return None
    if f.lip_nose_distance < DISGUST_MAX_LIP_NOSE and f.eye_opening < t.eye_opening * 0.8:
        return _clamp(1 - f.lip_nose_distance / DISGUST_FULL_LIP_NOSE)
    return None


def detect_confused(f: FaceFeatures, t: ThresholdConfig) -> Optional[float]:
    if (t.mouth_open * 0.3 < f.mouth_open < t.mouth_open * 0.8
            and f.brow_height > t.brow_raise * 0.5):
        return CONFUSED_CONFIDENCE
    return None


# Priority order: more distinctive expressions first
EXPRESSION_RULES: Tuple[Tuple[Expression, ExpressionRule], ...] = (
    (Expression.SCREAM, detect_scream),
    (Expression.SHOCK, detect_shock),
    (Expression.TONGUE, detect_tongue),
    (Expression.KISSY, detect_kissy),
    (Expression.HAPPY, detect_happy),
    (Expression.WINK, detect_wink),
    (Expression.SAD, detect_sad),
    (Expression.GLARE, detect_glare),
    (Expression.SUSPICIOUS, detect_suspicious),
    (Expression.SLEEPY, detect_sleepy),
    (Expression.EYEBROW, detect_eyebrow_raise),
    (Expression.POUT, detect_pout),
    (Expression.DISGUST, detect_disgust),
    (Expression.CONFUSED, detect_confused),
)


class ExpressionClassifier:
    """Stateless per-frame expression classifier."""

    def __init__(
        self,
        thresholds: Optional[ThresholdConfig] = None,
        min_landmarks: int = DetectionConfig.min_face_landmarks,
        rules: Sequence[Tuple[Expression, ExpressionRule]] = EXPRESSION_RULES,
    ):
        self._thresholds = thresholds or ThresholdConfig()
        self._min_landmarks = min_landmarks
        self._rules = tuple(rules)

    @property
    def min_landmarks(self) -> int:
        return self._min_landmarks

    @property
    def rules(self) -> Tuple[Tuple[Expression, ExpressionRule], ...]:
        return self._rules

    def classify(self, landmarks: Optional[Sequence]) -> Classification:
        """First matching rule, or NEUTRAL at confidence 0."""
        if not is_well_formed(landmarks, self._min_landmarks):
            return Classification(Expression.NEUTRAL, 0.0)

        features = FaceFeatures.from_landmarks(landmarks)
        for expression, rule in self._rules:
            confidence = rule(features, self._thresholds)
            if confidence is not None:
                return Classification(expression, confidence)
        return Classification(Expression.NEUTRAL, 0.0)


class ExpressionDetector:
    """
    Expression classifier wrapped in its own temporal stabilizer.

    ``analyze`` returns the stable expression with the raw confidence of
    the current frame.
    """

    def __init__(
        self,
        thresholds: Optional[ThresholdConfig] = None,
        transitions: Optional[TransitionConfig] = None,
        min_landmarks: int = DetectionConfig.min_face_landmarks,
    ):
        self.classifier = ExpressionClassifier(thresholds, min_landmarks)
        self.stabilizer = TemporalStabilizer(Expression.NEUTRAL, transitions)

    @property
    def current(self) -> Expression:
        return self.stabilizer.current

    @property
    def pending(self) -> Optional[Expression]:
        return self.stabilizer.pending

    @property
    def history(self) -> list:
        return self.stabilizer.history

    def analyze(self, landmarks: Optional[Sequence], now: Optional[float] = None) -> Classification:
        if not is_well_formed(landmarks, self.classifier.min_landmarks):
            return Classification(Expression.NEUTRAL, 0.0)
        raw = self.classifier.classify(landmarks)
        return self.stabilizer.update(raw, now)

    def reset(self) -> None:
        self.stabilizer.reset()
