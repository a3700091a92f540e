"""
Brainrot Detection Module

Expression and gesture classification from MediaPipe landmarks, with
temporal stabilization. The camera/MediaPipe tracker and the Qt worker
live in ``detection.tracker`` and ``detection.worker``.
"""
from .config import Config, load_config
from .categories import Expression, Gesture, Classification, display_info, format_badge
from .landmarks import Landmark
from .expressions import ExpressionClassifier, ExpressionDetector
from .gestures import GestureClassifier, GestureDetector
from .stabilizer import TemporalStabilizer
from .orchestrator import FrameOrchestrator, FrameResult

__all__ = [
    'Config',
    'load_config',
    'Expression',
    'Gesture',
    'Classification',
    'display_info',
    'format_badge',
    'Landmark',
    'ExpressionClassifier',
    'ExpressionDetector',
    'GestureClassifier',
    'GestureDetector',
    'TemporalStabilizer',
    'FrameOrchestrator',
    'FrameResult',
]
