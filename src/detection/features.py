"""
Geometric features computed from face and hand landmarks.

All functions are pure. Missing landmarks never raise: distances degrade
to 0 and boolean tests to False.
"""
from dataclasses import dataclass
from typing import NamedTuple, Optional, Sequence
import math

from .config import GestureConfig
from .landmarks import FaceLandmarkIndex as F, HandLandmarkIndex as H, point


# ----------------------------------------------------------------------
# Shared geometry
# ----------------------------------------------------------------------

def distance(landmarks: Sequence, idx1: int, idx2: int) -> float:
    """2D distance between two landmarks (z ignored), 0 if either is missing."""
    p1 = point(landmarks, idx1)
    p2 = point(landmarks, idx2)
    if p1 is None or p2 is None:
        return 0.0
    return math.hypot(p2.x - p1.x, p2.y - p1.y)


# ----------------------------------------------------------------------
# Face
# ----------------------------------------------------------------------

def left_eye_opening(landmarks: Sequence) -> float:
    return distance(landmarks, F.LEFT_EYE_TOP, F.LEFT_EYE_BOTTOM)


def right_eye_opening(landmarks: Sequence) -> float:
    return distance(landmarks, F.RIGHT_EYE_TOP, F.RIGHT_EYE_BOTTOM)


def eye_opening(landmarks: Sequence) -> float:
    """Average eyelid gap of both eyes."""
    return (left_eye_opening(landmarks) + right_eye_opening(landmarks)) / 2


def eye_ratio(landmarks: Sequence) -> float:
    """Smaller over larger eye opening. 1.0 (symmetric) when both are closed."""
    left, right = left_eye_opening(landmarks), right_eye_opening(landmarks)
    larger = max(left, right)
    if larger <= 0:
        return 1.0
    return min(left, right) / larger


def mouth_opening(landmarks: Sequence) -> float:
    return distance(landmarks, F.UPPER_LIP_TOP, F.LOWER_LIP_BOTTOM)


def mouth_width(landmarks: Sequence) -> float:
    return distance(landmarks, F.MOUTH_LEFT, F.MOUTH_RIGHT)


def smile_ratio(landmarks: Sequence) -> float:
    """
    Upper lip y minus the average mouth-corner y.

    Positive when the corners sit above the upper lip (smaller y), i.e. a
    smile. Negative when they droop.
    """
    left = point(landmarks, F.MOUTH_LEFT)
    right = point(landmarks, F.MOUTH_RIGHT)
    upper = point(landmarks, F.UPPER_LIP_TOP)
    if left is None or right is None or upper is None:
        return 0.0
    corner_height = (left.y + right.y) / 2
    return upper.y - corner_height


def pucker_ratio(landmarks: Sequence) -> float:
    width = mouth_width(landmarks)
    if width <= 0:
        return 0.0
    return mouth_opening(landmarks) / width


def eyebrow_height(landmarks: Sequence) -> float:
    """Average vertical gap between each eyebrow and the eye below it."""
    left_brow = point(landmarks, F.LEFT_BROW_TOP)
    right_brow = point(landmarks, F.RIGHT_BROW_TOP)
    left_eye = point(landmarks, F.LEFT_EYE_TOP)
    right_eye = point(landmarks, F.RIGHT_EYE_TOP)
    if left_brow is None or right_brow is None or left_eye is None or right_eye is None:
        return 0.0
    return ((left_eye.y - left_brow.y) + (right_eye.y - right_brow.y)) / 2


def lip_protrusion(landmarks: Sequence) -> Optional[float]:
    """Chin y minus lower lip center y, None if either is missing."""
    lower_lip = point(landmarks, F.LOWER_LIP_CENTER)
    chin = point(landmarks, F.CHIN)
    if lower_lip is None or chin is None:
        return None
    return chin.y - lower_lip.y


def lip_nose_distance(landmarks: Sequence) -> Optional[float]:
    """Upper lip y minus nose tip y, None if either is missing."""
    upper_lip = point(landmarks, F.UPPER_LIP_TOP)
    nose = point(landmarks, F.NOSE_TIP)
    if upper_lip is None or nose is None:
        return None
    return upper_lip.y - nose.y


@dataclass(frozen=True)
class FaceFeatures:
    """All face features of one frame, computed once and shared by every rule."""
    eye_opening: float
    left_eye: float
    right_eye: float
    eye_ratio: float
    mouth_open: float
    mouth_width: float
    smile_ratio: float
    pucker_ratio: float
    brow_height: float
    lip_protrusion: Optional[float]
    lip_nose_distance: Optional[float]

    @classmethod
    def from_landmarks(cls, landmarks: Sequence) -> "FaceFeatures":
        return cls(
            eye_opening=eye_opening(landmarks),
            left_eye=left_eye_opening(landmarks),
            right_eye=right_eye_opening(landmarks),
            eye_ratio=eye_ratio(landmarks),
            mouth_open=mouth_opening(landmarks),
            mouth_width=mouth_width(landmarks),
            smile_ratio=smile_ratio(landmarks),
            pucker_ratio=pucker_ratio(landmarks),
            brow_height=eyebrow_height(landmarks),
            lip_protrusion=lip_protrusion(landmarks),
            lip_nose_distance=lip_nose_distance(landmarks),
        )


# ----------------------------------------------------------------------
# Hand
# ----------------------------------------------------------------------

def is_finger_extended(landmarks: Sequence, tip_idx: int, pip_idx: int, margin: float = 0.02) -> bool:
    """Finger is extended when its tip is meaningfully above the PIP joint."""
    tip = point(landmarks, tip_idx)
    pip = point(landmarks, pip_idx)
    if tip is None or pip is None:
        return False
    return tip.y < pip.y - margin


def palm_center_x(landmarks: Sequence) -> Optional[float]:
    index_mcp = point(landmarks, H.INDEX_MCP)
    pinky_mcp = point(landmarks, H.PINKY_MCP)
    if index_mcp is None or pinky_mcp is None:
        return None
    return (index_mcp.x + pinky_mcp.x) / 2


def is_thumb_extended(landmarks: Sequence, spread_ratio: float = 1.2) -> bool:
    """
    Thumb is extended when its tip is clearly farther from the palm center
    (horizontally) than its MCP joint. The thumb folds sideways, so the
    vertical test used for the other digits does not apply.
    """
    tip = point(landmarks, H.THUMB_TIP)
    mcp = point(landmarks, H.THUMB_MCP)
    center = palm_center_x(landmarks)
    if tip is None or mcp is None or center is None:
        return False
    return abs(tip.x - center) > abs(mcp.x - center) * spread_ratio


def is_thumb_up(landmarks: Sequence, config: GestureConfig) -> bool:
    tip = point(landmarks, H.THUMB_TIP)
    wrist = point(landmarks, H.WRIST)
    if tip is None or wrist is None:
        return False
    return (tip.y < wrist.y - config.thumb_vertical_margin
            and is_thumb_extended(landmarks, config.thumb_spread_ratio))


def is_thumb_down(landmarks: Sequence, config: GestureConfig) -> bool:
    tip = point(landmarks, H.THUMB_TIP)
    wrist = point(landmarks, H.WRIST)
    if tip is None or wrist is None:
        return False
    return (tip.y > wrist.y + config.thumb_vertical_margin
            and is_thumb_extended(landmarks, config.thumb_spread_ratio))


class FingerStates(NamedTuple):
    thumb: bool
    index: bool
    middle: bool
    ring: bool
    pinky: bool


def finger_states(landmarks: Sequence, config: Optional[GestureConfig] = None) -> FingerStates:
    config = config or GestureConfig()
    margin = config.extension_margin
    return FingerStates(
        thumb=is_thumb_extended(landmarks, config.thumb_spread_ratio),
        index=is_finger_extended(landmarks, H.INDEX_TIP, H.INDEX_PIP, margin),
        middle=is_finger_extended(landmarks, H.MIDDLE_TIP, H.MIDDLE_PIP, margin),
        ring=is_finger_extended(landmarks, H.RING_TIP, H.RING_PIP, margin),
        pinky=is_finger_extended(landmarks, H.PINKY_TIP, H.PINKY_PIP, margin),
    )


@dataclass(frozen=True)
class HandFeatures:
    fingers: FingerStates
    thumb_up: bool
    thumb_down: bool
    # None when either tip is missing
    thumb_index_distance: Optional[float]

    @classmethod
    def from_landmarks(cls, landmarks: Sequence, config: GestureConfig) -> "HandFeatures":
        if point(landmarks, H.THUMB_TIP) is None or point(landmarks, H.INDEX_TIP) is None:
            touch = None
        else:
            touch = distance(landmarks, H.THUMB_TIP, H.INDEX_TIP)
        return cls(
            fingers=finger_states(landmarks, config),
            thumb_up=is_thumb_up(landmarks, config),
            thumb_down=is_thumb_down(landmarks, config),
            thumb_index_distance=touch,
        )
