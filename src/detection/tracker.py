"""
MediaPipe face and hand tracker using the Tasks API.
Handles camera capture and landmark detection for both models.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional
import logging
import time

import cv2
import numpy as np
import mediapipe as mp

from .config import Config, CameraConfig, MediaPipeConfig
from .landmarks import HAND_CONNECTIONS, Landmark, to_landmarks

logger = logging.getLogger(__name__)

# MediaPipe Tasks API imports
BaseOptions = mp.tasks.BaseOptions
FaceLandmarker = mp.tasks.vision.FaceLandmarker
FaceLandmarkerOptions = mp.tasks.vision.FaceLandmarkerOptions
HandLandmarker = mp.tasks.vision.HandLandmarker
HandLandmarkerOptions = mp.tasks.vision.HandLandmarkerOptions
VisionRunningMode = mp.tasks.vision.RunningMode

FACE_MODEL_URL = "https://storage.googleapis.com/mediapipe-models/face_landmarker/face_landmarker/float16/1/face_landmarker.task"
HAND_MODEL_URL = "https://storage.googleapis.com/mediapipe-models/hand_landmarker/hand_landmarker/float16/1/hand_landmarker.task"

PROJECT_ROOT = Path(__file__).parent.parent.parent


@dataclass
class TrackedFrame:
    """
    Landmarks of one camera frame.

    Attributes:
        face: Landmarks of the first face, or None
        hand: Landmarks of the first (dominant) hand, or None
        image: Mirrored BGR camera frame
    """
    face: Optional[List[Landmark]]
    hand: Optional[List[Landmark]]
    image: np.ndarray


def _resolve(path: str) -> Path:
    p = Path(path)
    return p if p.is_absolute() else PROJECT_ROOT / p


class LandmarkTracker:
    """
    Camera plus MediaPipe Face Landmarker and Hand Landmarker.

    The face model is required; failing to load it fails ``start``. The
    hand model is optional and detection continues face-only without it.
    """

    def __init__(self, config: Config):
        self._camera_config: CameraConfig = config.camera
        self._mp_config: MediaPipeConfig = config.mediapipe

        self._cap: Optional[cv2.VideoCapture] = None
        self._face: Optional[FaceLandmarker] = None
        self._hand: Optional[HandLandmarker] = None

        self._is_running = False
        self._last_frame: Optional[np.ndarray] = None
        self._frame_count = 0
        self._start_perf: float = 0
        self._last_timestamp_ms: int = -1

    def start(self) -> bool:
        """
        Open the camera and load the models.

        Returns:
            True if started successfully, False otherwise.
        """
        if self._is_running:
            return True

        face_path = _resolve(self._mp_config.face_model)
        if not face_path.exists():
            logger.error("Face model not found: %s (download from %s)", face_path, FACE_MODEL_URL)
            return False

        self._cap = cv2.VideoCapture(self._camera_config.device_id)
        if not self._cap.isOpened():
            logger.error("Could not open camera %d", self._camera_config.device_id)
            self._cap = None
            return False

        self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, self._camera_config.width)
        self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self._camera_config.height)
        self._cap.set(cv2.CAP_PROP_FPS, self._camera_config.fps)

        try:
            self._face = FaceLandmarker.create_from_options(FaceLandmarkerOptions(
                base_options=BaseOptions(model_asset_path=str(face_path)),
                running_mode=VisionRunningMode.VIDEO,
                num_faces=self._mp_config.num_faces,
                min_face_detection_confidence=self._mp_config.min_detection_confidence,
                min_face_presence_confidence=self._mp_config.min_presence_confidence,
                min_tracking_confidence=self._mp_config.min_tracking_confidence,
                output_face_blendshapes=False,
                output_facial_transformation_matrixes=False,
            ))
        except (RuntimeError, ValueError) as e:
            logger.error("FaceLandmarker creation failed: %s", e)
            self._cap.release()
            self._cap = None
            return False
        logger.info("FaceLandmarker ready")

        self._hand = self._create_hand_landmarker()

        self._start_perf = time.perf_counter()
        self._last_timestamp_ms = -1
        self._is_running = True
        return True

    def _create_hand_landmarker(self) -> Optional[HandLandmarker]:
        hand_path = _resolve(self._mp_config.hand_model)
        if not hand_path.exists():
            logger.warning("Hand model not found: %s, gestures disabled (download from %s)",
                           hand_path, HAND_MODEL_URL)
            return None
        try:
            landmarker = HandLandmarker.create_from_options(HandLandmarkerOptions(
                base_options=BaseOptions(model_asset_path=str(hand_path)),
                running_mode=VisionRunningMode.VIDEO,
                num_hands=self._mp_config.num_hands,
                min_hand_detection_confidence=self._mp_config.min_detection_confidence,
                min_hand_presence_confidence=self._mp_config.min_presence_confidence,
                min_tracking_confidence=self._mp_config.min_tracking_confidence,
            ))
        except (RuntimeError, ValueError) as e:
            logger.warning("Hand detection failed to load, continuing face-only: %s", e)
            return None
        logger.info("HandLandmarker ready")
        return landmarker

    def stop(self) -> None:
        """Stop camera capture and release resources."""
        self._is_running = False

        for landmarker in (self._face, self._hand):
            if landmarker:
                landmarker.close()
        self._face = None
        self._hand = None

        if self._cap:
            self._cap.release()
            self._cap = None

        self._last_frame = None

    def read(self) -> Optional[TrackedFrame]:
        """Capture one frame and detect face and hand landmarks."""
        if not self._is_running or self._cap is None or self._face is None:
            return None

        ret, frame = self._cap.read()
        if not ret:
            return None

        self._frame_count += 1

        if self._camera_config.mirror:
            frame = cv2.flip(frame, 1)
        self._last_frame = frame

        rgb_frame = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        rgb_frame.flags.writeable = False
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb_frame)

        # Strictly monotonic timestamp, required by VIDEO mode
        timestamp_ms = int((time.perf_counter() - self._start_perf) * 1000)
        if timestamp_ms <= self._last_timestamp_ms:
            timestamp_ms = self._last_timestamp_ms + 1
        self._last_timestamp_ms = timestamp_ms

        face = None
        try:
            result = self._face.detect_for_video(mp_image, timestamp_ms)
            if result.face_landmarks:
                face = to_landmarks(result.face_landmarks[0])
        except (RuntimeError, ValueError) as e:
            logger.debug("Face detection failed on frame %d: %s", self._frame_count, e)

        hand = None
        if self._hand is not None:
            try:
                result = self._hand.detect_for_video(mp_image, timestamp_ms)
                if result.hand_landmarks:
                    hand = to_landmarks(result.hand_landmarks[0])
            except (RuntimeError, ValueError) as e:
                logger.debug("Hand detection failed on frame %d: %s", self._frame_count, e)

        return TrackedFrame(face=face, hand=hand, image=frame)

    def draw_landmarks(self, tracked: TrackedFrame, black_background: bool = False) -> np.ndarray:
        """
        Frame with landmark overlay for debugging.

        Args:
            tracked: Frame returned by ``read``.
            black_background: If True, draw on black instead of camera image.
        """
        frame = np.zeros_like(tracked.image) if black_background else tracked.image.copy()
        h, w = frame.shape[:2]

        if tracked.face is not None:
            for lm in tracked.face:
                cv2.circle(frame, (int(lm.x * w), int(lm.y * h)), 1, (255, 200, 0), -1)

        if tracked.hand is not None:
            for lm in tracked.hand:
                cv2.circle(frame, (int(lm.x * w), int(lm.y * h)), 5, (0, 255, 0), -1)
            for start_idx, end_idx in HAND_CONNECTIONS:
                start = tracked.hand[start_idx]
                end = tracked.hand[end_idx]
                cv2.line(frame, (int(start.x * w), int(start.y * h)),
                         (int(end.x * w), int(end.y * h)), (0, 255, 0), 2)

        return frame

    @property
    def has_hands(self) -> bool:
        return self._hand is not None

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def frame_count(self) -> int:
        return self._frame_count
