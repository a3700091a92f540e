"""
Per-frame orchestration: landmarks -> categories -> arbitration -> meme.
"""
from dataclasses import dataclass
from typing import Optional, Sequence
import logging

from .categories import Category, Expression, Gesture
from .config import Config
from .expressions import ExpressionDetector
from .gestures import GestureDetector
from .stabilizer import now_ms

logger = logging.getLogger(__name__)


@dataclass
class FrameResult:
    """Outcome of one frame-processing cycle."""
    expression: Expression = Expression.NEUTRAL
    expression_confidence: float = 0.0
    gesture: Gesture = Gesture.NONE
    gesture_confidence: float = 0.0
    active: Category = Expression.NEUTRAL
    confidence: float = 0.0
    asset: Optional[str] = None
    fps: int = 0


class FrameOrchestrator:
    """
    Runs both detectors on a frame and decides what to show.

    A gesture wins over the expression when it is not NONE and its
    confidence is strictly above ``confidence_floor``. A new meme is
    picked only when the active category changes (or none is shown yet).

    Args:
        expression_detector: Owned expression detector.
        gesture_detector: Owned gesture detector.
        pool: Shared meme pool (anything with ``select(category)``), or None.
        confidence_floor: Minimum gesture confidence to override.
        target_fps: Throttle for ``should_process``; 0 disables it.
    """

    def __init__(
        self,
        expression_detector: ExpressionDetector,
        gesture_detector: GestureDetector,
        pool=None,
        confidence_floor: float = 0.5,
        target_fps: int = 30,
    ):
        self.expression_detector = expression_detector
        self.gesture_detector = gesture_detector
        self._pool = pool
        self._confidence_floor = confidence_floor
        self._min_interval = 1000.0 / target_fps if target_fps > 0 else 0.0

        self._last_frame_time: Optional[float] = None
        self._last_active: Optional[Category] = None
        self._asset: Optional[str] = None

        # FPS counter
        self._frame_count = 0
        self._fps_window_start: Optional[float] = None
        self._fps = 0

    @classmethod
    def from_config(cls, config: Config, pool=None) -> "FrameOrchestrator":
        return cls(
            ExpressionDetector(
                config.thresholds,
                config.transitions,
                config.detection.min_face_landmarks,
            ),
            GestureDetector(
                config.gestures,
                config.transitions,
                config.detection.min_hand_landmarks,
            ),
            pool=pool,
            confidence_floor=config.gestures.confidence_floor,
            target_fps=config.detection.target_fps,
        )

    @property
    def asset(self) -> Optional[str]:
        return self._asset

    @property
    def fps(self) -> int:
        return self._fps

    def should_process(self, now: Optional[float] = None) -> bool:
        """Throttle: accept a frame only once per ``1000 / target_fps`` ms."""
        if now is None:
            now = now_ms()
        if self._last_frame_time is not None and now - self._last_frame_time < self._min_interval:
            return False
        self._last_frame_time = now
        return True

    def process(
        self,
        face_landmarks: Optional[Sequence] = None,
        hand_landmarks: Optional[Sequence] = None,
        now: Optional[float] = None,
    ) -> FrameResult:
        if now is None:
            now = now_ms()
        self._count_frame(now)

        expression = self.expression_detector.analyze(face_landmarks, now)
        gesture = self.gesture_detector.analyze(hand_landmarks, now)

        active, confidence = expression.category, expression.confidence
        if gesture.category != Gesture.NONE and gesture.confidence > self._confidence_floor:
            active, confidence = gesture.category, gesture.confidence

        if self._asset is None or active != self._last_active:
            self._asset = self._pool.select(active) if self._pool is not None else None
            if active != self._last_active:
                logger.debug("Active category: %s (%.2f)", active.value, confidence)
            self._last_active = active

        return FrameResult(
            expression=expression.category,
            expression_confidence=expression.confidence,
            gesture=gesture.category,
            gesture_confidence=gesture.confidence,
            active=active,
            confidence=confidence,
            asset=self._asset,
            fps=self._fps,
        )

    def _count_frame(self, now: float) -> None:
        self._frame_count += 1
        if self._fps_window_start is None:
            self._fps_window_start = now
        elif now - self._fps_window_start >= 1000.0:
            self._fps = self._frame_count
            self._frame_count = 0
            self._fps_window_start = now

    def reset(self) -> None:
        """End of session: detectors back to defaults, meme cleared."""
        self.expression_detector.reset()
        self.gesture_detector.reset()
        self._last_active = None
        self._asset = None
        self._last_frame_time = None
        self._frame_count = 0
        self._fps_window_start = None
        self._fps = 0
