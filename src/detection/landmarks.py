"""
Landmark types and MediaPipe index tables.
"""
from typing import Iterable, List, NamedTuple, Optional, Sequence


class Landmark(NamedTuple):
    """A normalized landmark. x, y in [0, 1] image space, y grows downward."""
    x: float
    y: float
    z: float = 0.0


class FaceLandmarkIndex:
    """MediaPipe Face Mesh indices used by the expression rules."""
    # Eyes
    LEFT_EYE_TOP = 159
    LEFT_EYE_BOTTOM = 145
    RIGHT_EYE_TOP = 386
    RIGHT_EYE_BOTTOM = 374

    # Eyebrows
    LEFT_BROW_TOP = 63
    RIGHT_BROW_TOP = 293

    # Mouth
    UPPER_LIP_TOP = 13
    LOWER_LIP_BOTTOM = 14
    MOUTH_LEFT = 61
    MOUTH_RIGHT = 291
    LOWER_LIP_CENTER = 17

    NOSE_TIP = 4
    CHIN = 152


class HandLandmarkIndex:
    """MediaPipe Hands indices (21 landmarks per hand)."""
    WRIST = 0
    THUMB_CMC = 1
    THUMB_MCP = 2
    THUMB_IP = 3
    THUMB_TIP = 4
    INDEX_MCP = 5
    INDEX_PIP = 6
    INDEX_DIP = 7
    INDEX_TIP = 8
    MIDDLE_MCP = 9
    MIDDLE_PIP = 10
    MIDDLE_DIP = 11
    MIDDLE_TIP = 12
    RING_MCP = 13
    RING_PIP = 14
    RING_DIP = 15
    RING_TIP = 16
    PINKY_MCP = 17
    PINKY_PIP = 18
    PINKY_DIP = 19
    PINKY_TIP = 20


# Hand connections for drawing (same as MediaPipe's HAND_CONNECTIONS)
HAND_CONNECTIONS = [
    (0, 1), (1, 2), (2, 3), (3, 4),      # Thumb
    (0, 5), (5, 6), (6, 7), (7, 8),      # Index
    (0, 9), (9, 10), (10, 11), (11, 12), # Middle
    (0, 13), (13, 14), (14, 15), (15, 16), # Ring
    (0, 17), (17, 18), (18, 19), (19, 20), # Pinky
    (5, 9), (9, 13), (13, 17),           # Palm
]


def point(landmarks: Sequence, index: int):
    """Landmark at index, or None when the set is too short or has a gap."""
    if landmarks is None or index < 0 or index >= len(landmarks):
        return None
    return landmarks[index]


def is_well_formed(landmarks: Optional[Sequence], minimum: int) -> bool:
    """A landmark set is usable only when it holds at least `minimum` points."""
    return landmarks is not None and len(landmarks) >= minimum


def to_landmarks(points: Iterable) -> List[Landmark]:
    """Convert MediaPipe NormalizedLandmarks (or x/y/z objects) to Landmarks."""
    return [Landmark(p.x, p.y, getattr(p, "z", 0.0) or 0.0) for p in points]
