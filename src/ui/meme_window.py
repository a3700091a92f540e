"""
Meme window - camera preview on the left, meme and badge on the right.
"""
from typing import Dict, Optional
from PyQt5.QtWidgets import QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QLabel, QGraphicsOpacityEffect
from PyQt5.QtCore import Qt, QPropertyAnimation
from PyQt5.QtGui import QImage, QPixmap
import numpy as np

from detection.categories import format_badge
from detection.orchestrator import FrameResult

PLACEHOLDER_TEXT = "🐱\nWaiting for detection..."

STYLE_SHEET = """
QMainWindow { background-color: #09090b; }
QLabel#MemeLabel { background-color: black; border-radius: 16px; color: #71717a; font-size: 18px; }
QLabel#BadgeLabel { background-color: rgba(0, 0, 0, 160); border-radius: 14px;
                    color: white; font-size: 18px; font-weight: 600; padding: 6px 16px; }
QLabel#FpsLabel { color: #71717a; font-size: 11px; }
QLabel#CameraLabel { background-color: black; border-radius: 16px; }
"""


class MemeWindow(QMainWindow):
    """
    Shows the meme matching the current expression or gesture.

    Images are cached per path and faded in over ``crossfade_duration`` ms
    whenever the selected asset changes.
    """

    def __init__(self, title: str = "Brainrot", crossfade_duration: int = 300,
                 show_camera: bool = True, parent=None):
        super().__init__(parent)
        self._crossfade_duration = crossfade_duration
        self._show_camera = show_camera
        self._current_asset: Optional[str] = None
        self._pixmaps: Dict[str, QPixmap] = {}

        self.setWindowTitle(title)
        self.setStyleSheet(STYLE_SHEET)
        self._setup_ui()
        self.resize(1280 if show_camera else 640, 560)

    def _setup_ui(self):
        """Build the UI."""
        central = QWidget()
        layout = QHBoxLayout(central)
        layout.setContentsMargins(16, 16, 16, 16)
        layout.setSpacing(16)
        self.setCentralWidget(central)

        self.camera_label = QLabel()
        self.camera_label.setObjectName("CameraLabel")
        self.camera_label.setAlignment(Qt.AlignCenter)
        self.camera_label.setMinimumSize(480, 360)
        self.camera_label.setVisible(self._show_camera)
        layout.addWidget(self.camera_label, 1)

        meme_column = QWidget()
        meme_layout = QVBoxLayout(meme_column)
        meme_layout.setContentsMargins(0, 0, 0, 0)

        self.meme_label = QLabel(PLACEHOLDER_TEXT)
        self.meme_label.setObjectName("MemeLabel")
        self.meme_label.setAlignment(Qt.AlignCenter)
        self.meme_label.setMinimumSize(480, 360)
        self._opacity = QGraphicsOpacityEffect(self.meme_label)
        self._opacity.setOpacity(1.0)
        self.meme_label.setGraphicsEffect(self._opacity)
        self._fade = QPropertyAnimation(self._opacity, b"opacity", self)
        meme_layout.addWidget(self.meme_label, 1)

        self.badge_label = QLabel(format_badge("neutral", 0.0))
        self.badge_label.setObjectName("BadgeLabel")
        self.badge_label.setAlignment(Qt.AlignCenter)
        meme_layout.addWidget(self.badge_label, 0, Qt.AlignHCenter)

        self.fps_label = QLabel("0 fps")
        self.fps_label.setObjectName("FpsLabel")
        meme_layout.addWidget(self.fps_label, 0, Qt.AlignRight)

        layout.addWidget(meme_column, 1)

    def show_result(self, result: FrameResult):
        """Update badge, FPS and (if it changed) the meme."""
        self.badge_label.setText(format_badge(result.active, result.confidence))
        self.fps_label.setText(f"{result.fps} fps")
        if result.asset != self._current_asset:
            self.set_meme(result.asset)

    def set_meme(self, asset: Optional[str]):
        self._current_asset = asset
        if asset is None:
            self.meme_label.setPixmap(QPixmap())
            self.meme_label.setText(PLACEHOLDER_TEXT)
            return

        pixmap = self._pixmaps.get(asset)
        if pixmap is None:
            pixmap = QPixmap(asset)
            if pixmap.isNull():
                # Keep the current image on load errors
                return
            self._pixmaps[asset] = pixmap

        self.meme_label.setPixmap(pixmap.scaled(
            self.meme_label.size(), Qt.KeepAspectRatio, Qt.SmoothTransformation))
        self._fade.stop()
        self._fade.setDuration(self._crossfade_duration)
        self._fade.setStartValue(0.0)
        self._fade.setEndValue(1.0)
        self._fade.start()

    def set_webcam_frame(self, frame: np.ndarray):
        """
        Update the camera preview.
        
        Args:
            frame: BGR numpy array with landmarks drawn by LandmarkTracker
        """
        if frame is None:
            self.camera_label.clear()
            return
        
        rgb = frame[:, :, ::-1].copy()
        h, w, ch = rgb.shape
        bytes_per_line = ch * w
        qimg = QImage(rgb.data, w, h, bytes_per_line, QImage.Format_RGB888)
        pixmap = QPixmap.fromImage(qimg)
        self.camera_label.setPixmap(pixmap.scaled(
            self.camera_label.size(), Qt.KeepAspectRatio, Qt.FastTransformation))
