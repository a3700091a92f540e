"""
Background worker for landmark tracking and expression/gesture detection.
Runs in a separate QThread to avoid blocking the UI.
"""
import logging
import time
from typing import Optional
from PyQt5.QtCore import QObject, pyqtSignal

from .config import Config
from .orchestrator import FrameOrchestrator
from .tracker import LandmarkTracker

logger = logging.getLogger(__name__)


class DetectionWorker(QObject):
    """
    Worker class that runs the capture -> detect -> select loop.
    Emits signals for UI updates.
    """
    # Signals
    result_ready = pyqtSignal(object)  # Emits FrameResult
    frame_ready = pyqtSignal(object)   # Emits numpy array (BGR preview frame)
    error = pyqtSignal(str)

    def __init__(self, config: Config, pool=None, parent=None):
        super().__init__(parent)
        self._config = config
        self._pool = pool
        self._tracker: Optional[LandmarkTracker] = None
        self._orchestrator: Optional[FrameOrchestrator] = None
        self._is_running = False

    def start_process(self):
        """Main processing loop. Runs in worker thread."""
        self._tracker = LandmarkTracker(self._config)
        self._orchestrator = FrameOrchestrator.from_config(self._config, self._pool)

        if not self._tracker.start():
            self.error.emit("Could not start landmark tracking (camera or face model unavailable)")
            return

        self._is_running = True
        logger.info("Detection started (hands: %s)", self._tracker.has_hands)

        preview_interval = 1.0 / 15
        last_preview = 0.0

        try:
            while self._is_running:
                tracked = self._tracker.read()
                if tracked is None:
                    time.sleep(0.01)
                    continue

                if not self._orchestrator.should_process():
                    continue

                result = self._orchestrator.process(tracked.face, tracked.hand)
                self.result_ready.emit(result)

                now = time.perf_counter()
                if self._config.ui.show_camera and now - last_preview >= preview_interval:
                    self.frame_ready.emit(self._tracker.draw_landmarks(tracked))
                    last_preview = now

        except Exception as e:
            logger.exception("Detection loop failed")
            self.error.emit(f"Worker Exception: {str(e)}")
        finally:
            self._is_running = False
            self._tracker.stop()
            self._orchestrator.reset()
            logger.info("Detection stopped")

    def stop_process(self):
        """Signal the loop to stop; resources are released in the worker thread."""
        self._is_running = False
